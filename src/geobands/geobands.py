import configparser
import logging
import os.path
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence

from funcy import decorator
from pyfiglet import Figlet
from returns.maybe import Some
from rich.prompt import Confirm, Prompt

from geobands import config, constants
from geobands.colors import ramp_by_name
from geobands.errors import DegenerateValueRange
from geobands.features import contour_features
from geobands.ingest import default_position, default_value, ingest
from geobands.interpolation import dense_grid, grid_for_samples, synthetic_elevation
from geobands.models import Bounds, Grid, RunResult, Style
from geobands.readers import registry
from geobands.spatial.marching_squares import extract_contours
from geobands.streaming import stream_features
from geobands.thresholds import evenly_spaced_thresholds, validate_thresholds

CONSOLE_FORMAT = "%(message)s"
LOGFILE_FORMAT = "%(asctime)s|%(levelname)s|%(name)s|%(message)s"


def init_logging(configuration: Optional[config.Config] = None):
    logger = logging.getLogger(constants.ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logfile_handler = logging.FileHandler(constants.LOGFILE_NAME, "w")
    logfile_handler.setLevel(logging.DEBUG)
    logfile_handler.setFormatter(logging.Formatter(LOGFILE_FORMAT))
    logger.addHandler(logfile_handler)


@decorator
def log(call):
    logging.getLogger(constants.ROOT_LOGGER).info(call._func.__name__)
    return call()


def banner():
    """
    Displays the name of this utility using incredible ASCII-art.
    """
    f = Figlet(font='slant')
    return f.renderText('geobands')


def init_config(configuration_file):
    """
    Prompts the user for configuration values and then creates a valid configuration file.
    """
    print("""This utility will create a contouring configuration file by prompting """
          """you for values for each of the configuration parameters.""")
    print()
    if not configuration_file:
        configuration_file = Prompt.ask("configuration file name", default="geobands.ini")
    else:
        print(f'Creating configuration file {configuration_file}')
        print()

    if os.path.exists(configuration_file):
        print(f'WARNING: The {configuration_file} already exists.')
        overwrite = Confirm.ask("Overwrite?")
        if not overwrite:
            print('Not overwriting existing file. Exiting.')
            exit(1)

    cfg_parser = configparser.ConfigParser()

    print()
    print(f'{constants.SOURCE_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.SOURCE_SECTION_NAME)
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "samples_file", Prompt.ask("Samples file (.csv or .geojson)", default="samples.csv"))
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "longitude_field", Prompt.ask("Longitude column", default=constants.DEFAULT_LONGITUDE_FIELD))
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "latitude_field", Prompt.ask("Latitude column", default=constants.DEFAULT_LATITUDE_FIELD))
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "value_field", Prompt.ask("Value column or property", default=constants.DEFAULT_VALUE_FIELD))

    print()
    print(f'{constants.GRID_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.GRID_SECTION_NAME)
    cfg_parser.set(constants.GRID_SECTION_NAME, "cell_size", Prompt.ask("Cell size", default=str(constants.DEFAULT_CELL_SIZE)))
    cfg_parser.set(constants.GRID_SECTION_NAME, "cell_size_units", Prompt.ask("Cell size units", choices=list(constants.CELL_SIZE_UNITS), default=constants.DEFAULT_CELL_SIZE_UNITS))
    cfg_parser.set(constants.GRID_SECTION_NAME, "weight", Prompt.ask("Inverse distance weight exponent", default=str(constants.DEFAULT_WEIGHT)))

    print()
    print(f'{constants.CONTOURS_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.CONTOURS_SECTION_NAME)
    cfg_parser.set(constants.CONTOURS_SECTION_NAME, "mode", Prompt.ask("Contour mode", choices=list(constants.MODES), default=constants.DEFAULT_MODE))
    cfg_parser.set(constants.CONTOURS_SECTION_NAME, "num_bands", Prompt.ask("Number of bands", default=str(constants.DEFAULT_NUM_BANDS)))
    cfg_parser.set(constants.CONTOURS_SECTION_NAME, "thresholds", Prompt.ask("Explicit thresholds (comma separated, blank for even bands)", default=""))

    print()
    print(f'{constants.STYLE_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.STYLE_SECTION_NAME)
    cfg_parser.set(constants.STYLE_SECTION_NAME, "color_ramp", Prompt.ask("Color ramp", choices=list(constants.COLOR_RAMPS), default=constants.DEFAULT_COLOR_RAMP))
    cfg_parser.set(constants.STYLE_SECTION_NAME, "opacity", Prompt.ask("Opacity", default=str(constants.DEFAULT_OPACITY)))
    cfg_parser.set(constants.STYLE_SECTION_NAME, "fill_format", Prompt.ask("Fill format", choices=list(constants.FILL_FORMATS), default=constants.DEFAULT_FILL_FORMAT))

    print()
    print(f'{constants.DESTINATION_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.DESTINATION_SECTION_NAME)
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "output_file", Prompt.ask("Output GeoJSON file", default=constants.DEFAULT_OUTPUT_FILE))

    print()
    print(f'Saving new configuration: {configuration_file}')
    with open(configuration_file, "tw") as file:
        cfg_parser.write(file)

    return configuration_file

# -------------------------------------------------------------------
# -------------------------------------------------------------------


def resolve_thresholds(explicit: Sequence[float], min_value: float, max_value: float,
                       num_bands: int, result: RunResult) -> list:
    """
    Returns the explicit thresholds when given, otherwise num_bands + 1 evenly
    spaced ones over the observed range. A flat range records a
    DegenerateValueRange diagnostic and yields no thresholds.
    """
    if explicit:
        return validate_thresholds(explicit)

    thresholds = evenly_spaced_thresholds(min_value, max_value, num_bands)
    if not thresholds:
        result.diagnostics.warn(
            DegenerateValueRange,
            f'All values equal {min_value}; no bands can be generated',
            value=min_value,
        )
    return thresholds


@log
def contour_grid(grid: Grid, min_value: float, max_value: float, mode: str,
                 thresholds: list, style: Style, sink, result: RunResult) -> RunResult:
    """
    Extracts contours from the grid and streams them to the sink as features.
    """
    result.grid_shape = Some(grid.shape)
    result.min_value = min_value
    result.max_value = max_value
    result.thresholds = list(thresholds)

    if mode == 'cells' or thresholds:
        contours = extract_contours(grid, thresholds, mode)
    else:
        contours = iter(())

    features = contour_features(contours, grid, min_value, max_value, style)
    summary = stream_features(features, sink)

    result.features = summary.features
    result.bytes_written = summary.bytes_written
    return result


def run(records: Iterable[Any],
        sink,
        style: Style,
        cell_size: float = constants.DEFAULT_CELL_SIZE,
        cell_size_units: str = constants.DEFAULT_CELL_SIZE_UNITS,
        weight: float = constants.DEFAULT_WEIGHT,
        mode: str = constants.DEFAULT_MODE,
        num_bands: int = constants.DEFAULT_NUM_BANDS,
        thresholds: Sequence[float] = (),
        get_position: Callable[[Any], Any] = default_position,
        get_value: Callable[[Any], Any] = default_value) -> RunResult:
    """
    Turns scattered samples into colored contour features written to sink.

    Ingestion -> IDW interpolation -> contour extraction -> coloring and
    projection per feature -> streaming. With too few valid samples nothing
    is written and the result carries an InsufficientSamples diagnostic.
    InterpolationFailure and SinkWriteFailure propagate to the caller.
    """
    if mode not in constants.MODES:
        raise ValueError(f"Unknown contour mode {mode}")

    result = RunResult()
    maybe_samples = ingest(records, result.diagnostics, get_position, get_value)
    result.samples = maybe_samples

    sample_set = maybe_samples.value_or(None)
    if sample_set is None:
        return result

    grid = grid_for_samples(sample_set, cell_size, cell_size_units, weight)
    levels = [] if mode == 'cells' else resolve_thresholds(
        thresholds, sample_set.min_value, sample_set.max_value, num_bands, result)

    return contour_grid(grid, sample_set.min_value, sample_set.max_value, mode,
                        levels, style, sink, result)


def process(configuration: config.Config) -> RunResult:
    """
    Reads the configured samples file and writes the contour GeoJSON.
    """
    reader = registry.lookup(Path(configuration.samples_file).suffix)
    records = reader(configuration.samples_file, configuration)

    result = run(
        records,
        configuration.output_file,
        configuration.style(),
        cell_size=configuration.cell_size,
        cell_size_units=configuration.cell_size_units,
        weight=configuration.weight,
        mode=configuration.mode,
        num_bands=configuration.num_bands,
        thresholds=configuration.thresholds,
    )
    if result.grid_shape.value_or(None) is not None:
        result.output = configuration.output_file

    summarize_result(result)
    return result


def synthesize(bounds: Bounds = constants.SYNTHETIC_BOUNDS,
               spacing_m: float = constants.SYNTHETIC_SPACING_M,
               num_bands: int = constants.SYNTHETIC_NUM_BANDS,
               output_file: str = constants.SYNTHETIC_OUTPUT_FILE,
               mode: str = 'thresholds',
               opacity: float = constants.SYNTHETIC_OPACITY,
               seed: Optional[int] = None) -> RunResult:
    """
    Builds a dense synthetic elevation grid and writes its contours.

    Used to produce large test datasets without any sample input.
    """
    logger = logging.getLogger(constants.ROOT_LOGGER)
    logger.info("Generating grid values...")
    grid = dense_grid(bounds, spacing_m, generator=synthetic_elevation(bounds, seed=seed))
    min_value, max_value = grid.min_value, grid.max_value
    logger.info(f"Value range: {min_value:.1f} - {max_value:.1f}")

    result = RunResult()
    style = Style(ramp=ramp_by_name('elevation'), opacity=opacity)
    levels = [] if mode == 'cells' else resolve_thresholds((), min_value, max_value, num_bands, result)

    logger.info("Generating contour bands...")
    contour_grid(grid, min_value, max_value, mode, levels, style, output_file, result)
    result.output = output_file

    summarize_result(result)
    return result


def summarize_result(result: RunResult) -> None:
    logger = logging.getLogger(constants.ROOT_LOGGER)
    logger.info("Processing Summary")
    logger.info("==================")
    samples = result.samples.value_or(None)
    if samples is not None:
        logger.info(f"Samples: {samples.accepted} accepted, {samples.dropped} dropped")
    grid_shape = result.grid_shape.value_or(None)
    if grid_shape is not None:
        logger.info(f"Grid: {grid_shape[0]} x {grid_shape[1]}")
    if result.min_value is not None:
        logger.info(f"Value range: {result.min_value} - {result.max_value}")
    logger.info(f"Features: {result.features}")
    logger.info(f"Output: {result.output or 'none'}")
    logger.info(f"Warnings: {len(result.diagnostics)}")
    for entry in result.diagnostics:
        logger.info(f"  * {entry.category.__name__}: {entry.message}")
