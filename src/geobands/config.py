import configparser
import dataclasses
import logging
import os.path

from geobands import constants
from geobands.colors import ramp_by_name
from geobands.models import Style
from geobands.thresholds import parse_thresholds, validate_thresholds


@dataclasses.dataclass
class Config:
    samples_file: str
    longitude_field: str
    latitude_field: str
    value_field: str
    cell_size: float
    cell_size_units: str
    weight: float
    mode: str
    num_bands: int
    thresholds: list
    color_ramp: str
    opacity: float
    fill_format: str
    stroke_width: float
    output_file: str

    def show(self):
        logger = logging.getLogger(constants.ROOT_LOGGER)
        logger.info('')
        logger.info('Using configuration:')
        for k, v in self.__dict__.items():
            logger.info(f'  + {k}: {v}')

    def style(self) -> Style:
        return Style(
            ramp=ramp_by_name(self.color_ramp),
            opacity=self.opacity,
            fill_format=self.fill_format,
            stroke_width=self.stroke_width,
        )


def config_parser_factory(configuration_file):
    """
    Returns a ConfigParser by reading the specified file.
    """
    if configuration_file is None or not os.path.exists(configuration_file):
        raise ValueError(f'Unable to find configuration file {configuration_file}')
    cfg_parser = configparser.ConfigParser(interpolation=configparser.ExtendedInterpolation())
    cfg_parser.read(configuration_file)
    return cfg_parser


def _get_configuration_value(section, name, value_type, config_parser, overrides):
    """
    Returns a value from the provided config parser; any value for the key that
    is provided in the 'overrides' dictionary will take precedence.
    """
    if overrides.get(name) is not None:
        return overrides.get(name)

    if value_type is bool:
        return config_parser.getboolean(section, name)
    elif value_type is int:
        return config_parser.getint(section, name)
    elif value_type is float:
        return config_parser.getfloat(section, name)
    elif value_type is list:
        return parse_thresholds(config_parser.get(section, name))
    else:
        return config_parser.get(section, name)


def _ensure_sections(config_parser):
    for section in [constants.SOURCE_SECTION_NAME,
                    constants.GRID_SECTION_NAME,
                    constants.CONTOURS_SECTION_NAME,
                    constants.STYLE_SECTION_NAME,
                    constants.DESTINATION_SECTION_NAME]:
        if not config_parser.has_section(section):
            config_parser.add_section(section)


def configuration(config_parser, overrides):
    """
    Returns a valid Config object that is populated from the provided config
    parser, with values overriden with anything provided in 'overrides'.
    """
    config_parser['DEFAULT'] = {
        'longitude_field': constants.DEFAULT_LONGITUDE_FIELD,
        'latitude_field': constants.DEFAULT_LATITUDE_FIELD,
        'value_field': constants.DEFAULT_VALUE_FIELD,
        'cell_size': constants.DEFAULT_CELL_SIZE,
        'cell_size_units': constants.DEFAULT_CELL_SIZE_UNITS,
        'weight': constants.DEFAULT_WEIGHT,
        'mode': constants.DEFAULT_MODE,
        'num_bands': constants.DEFAULT_NUM_BANDS,
        'thresholds': constants.DEFAULT_THRESHOLDS,
        'color_ramp': constants.DEFAULT_COLOR_RAMP,
        'opacity': constants.DEFAULT_OPACITY,
        'fill_format': constants.DEFAULT_FILL_FORMAT,
        'stroke_width': constants.DEFAULT_STROKE_WIDTH,
        'output_file': constants.DEFAULT_OUTPUT_FILE,
    }
    _ensure_sections(config_parser)

    source = constants.SOURCE_SECTION_NAME
    grid = constants.GRID_SECTION_NAME
    contours = constants.CONTOURS_SECTION_NAME
    style = constants.STYLE_SECTION_NAME
    destination = constants.DESTINATION_SECTION_NAME
    try:
        return Config(
            _get_configuration_value(source, 'samples_file', str, config_parser, overrides),
            _get_configuration_value(source, 'longitude_field', str, config_parser, overrides),
            _get_configuration_value(source, 'latitude_field', str, config_parser, overrides),
            _get_configuration_value(source, 'value_field', str, config_parser, overrides),
            _get_configuration_value(grid, 'cell_size', float, config_parser, overrides),
            _get_configuration_value(grid, 'cell_size_units', str, config_parser, overrides),
            _get_configuration_value(grid, 'weight', float, config_parser, overrides),
            _get_configuration_value(contours, 'mode', str, config_parser, overrides),
            _get_configuration_value(contours, 'num_bands', int, config_parser, overrides),
            _get_configuration_value(contours, 'thresholds', list, config_parser, overrides),
            _get_configuration_value(style, 'color_ramp', str, config_parser, overrides),
            _get_configuration_value(style, 'opacity', float, config_parser, overrides),
            _get_configuration_value(style, 'fill_format', str, config_parser, overrides),
            _get_configuration_value(style, 'stroke_width', float, config_parser, overrides),
            _get_configuration_value(destination, 'output_file', str, config_parser, overrides),
        )
    except (configparser.Error, ValueError) as e:
        raise ValueError(f'Unable to read the configuration file: {e}') from e


def _valid_thresholds(thresholds):
    if not thresholds:
        return True
    try:
        validate_thresholds(thresholds)
    except ValueError:
        return False
    return True


def _output_dir_exists(output_file):
    return os.path.isdir(os.path.dirname(os.path.abspath(output_file)))


def validate(configuration):
    """
    Validates each value in the configuration.
    """
    validations = [
        ['samples_file', lambda path: os.path.exists(path), 'The samples_file does not exist.'],
        ['cell_size', lambda size: size > 0, 'The cell_size must be positive.'],
        ['cell_size_units', lambda units: units in constants.CELL_SIZE_UNITS,
         f'The cell_size_units must be one of {", ".join(constants.CELL_SIZE_UNITS)}.'],
        ['weight', lambda weight: weight > 0, 'The weight must be positive.'],
        ['mode', lambda mode: mode in constants.MODES,
         f'The mode must be one of {", ".join(constants.MODES)}.'],
        ['num_bands', lambda n: n >= 1, 'The num_bands must be at least 1.'],
        ['thresholds', _valid_thresholds, 'The thresholds must be strictly increasing numbers.'],
        ['color_ramp', lambda name: name in constants.COLOR_RAMPS,
         f'The color_ramp must be one of {", ".join(constants.COLOR_RAMPS)}.'],
        ['opacity', lambda opacity: 0 <= opacity <= 1, 'The opacity must be between 0 and 1.'],
        ['fill_format', lambda fmt: fmt in constants.FILL_FORMATS,
         f'The fill_format must be one of {", ".join(constants.FILL_FORMATS)}.'],
        ['output_file', _output_dir_exists, 'The output_file directory does not exist.'],
    ]
    errors = [msg for name, fn, msg in validations if not fn(getattr(configuration, name))]
    return len(errors) == 0, errors
