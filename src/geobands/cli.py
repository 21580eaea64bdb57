import click

from geobands import config
from geobands import constants
from geobands import geobands
from geobands.errors import GeobandsError


@click.group(epilog="For detailed help on each command, run: geobands COMMAND --help")
def cli():
    """The geobands utility interpolates scattered or gridded scalar samples
    and writes classified contour polygons as a GeoJSON FeatureCollection."""
    pass

@cli.command()
@click.option('-c', '--config', help='Path to configuration file to create or replace')
def init(config):
    """Populates a configuration file based on user input."""
    click.echo(geobands.banner())
    config = geobands.init_config(config)
    click.echo(f'Initialized the geobands configuration file {config}')

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file to display', required=True)
def info(config_filename):
    """Summarizes the contents of a configuration file."""
    click.echo(geobands.banner())
    configuration = config.configuration(config.config_parser_factory(config_filename), {})
    geobands.init_logging(configuration)
    configuration.show()

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file', required=True)
@click.option('-o', '--output', 'output_file', help='GeoJSON file to write, overriding the configuration.')
@click.option('-m', '--mode', type=click.Choice(constants.MODES), help='Contour mode, overriding the configuration.')
@click.option('-b', '--bands', 'num_bands', type=int, help='Number of evenly spaced bands, overriding the configuration.')
def process(config_filename, output_file, mode, num_bands):
    """Contours the samples file named in the configuration."""
    click.echo(geobands.banner())
    overrides = {
        'output_file': output_file,
        'mode': mode,
        'num_bands': num_bands,
    }
    configuration = config.configuration(config.config_parser_factory(config_filename), overrides)
    geobands.init_logging(configuration)
    configuration.show()

    valid, errors = config.validate(configuration)
    if not valid:
        click.echo("The configuration is invalid:")
        for msg in errors:
            click.echo(" * " + msg)
        exit(1)

    try:
        geobands.process(configuration)
    except (GeobandsError, ValueError) as e:
        click.echo("\nUnable to process data: " + str(e))
        exit(1)
    click.echo(f'Processed samples using the configuration file {config_filename}')

@cli.command()
@click.option('--bounds', nargs=4, type=float, default=constants.SYNTHETIC_BOUNDS, show_default=True,
              metavar='WEST SOUTH EAST NORTH', help='Grid bounds in degrees.')
@click.option('--spacing', type=float, default=constants.SYNTHETIC_SPACING_M, show_default=True,
              help='Grid spacing in meters.')
@click.option('-b', '--bands', 'num_bands', type=int, default=constants.SYNTHETIC_NUM_BANDS, show_default=True,
              help='Number of evenly spaced bands.')
@click.option('-m', '--mode', type=click.Choice(constants.MODES), default='thresholds', show_default=True)
@click.option('--seed', type=int, help='Seed for the elevation noise.')
@click.option('-o', '--output', 'output_file', default=constants.SYNTHETIC_OUTPUT_FILE, show_default=True)
def synthesize(bounds, spacing, num_bands, mode, seed, output_file):
    """Writes contours of a synthetic elevation grid, for test data."""
    click.echo(geobands.banner())
    geobands.init_logging()
    try:
        geobands.synthesize(tuple(bounds), spacing, num_bands, output_file, mode=mode, seed=seed)
    except (GeobandsError, ValueError) as e:
        click.echo("\nUnable to synthesize data: " + str(e))
        exit(1)
    click.echo(f'Wrote synthetic contours to {output_file}')

if __name__ == "__main__":
    cli()
