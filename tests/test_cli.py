from unittest.mock import patch

from click.testing import CliRunner
import pytest

from geobands.cli import cli
from geobands.errors import SinkWriteFailure


# Unit tests for the 'cli' module functions.
#
# The test boundary is the cli module's interface with the geobands module, so
# in addition to testing the cli module's behavior, the tests should mock that
# module's functions and assert that cli functions call them with the correct
# parameters, correctly handle their return values, and handle any exceptions
# they may throw.

@pytest.fixture
def cli_runner():
    return CliRunner()

def test_without_subcommand(cli_runner):
    result = cli_runner.invoke(cli)
    assert 'Usage' in result.output
    assert 'Commands' in result.output
    for subcommand in ['info', 'init', 'process', 'synthesize']:
        assert subcommand in result.output

def test_help(cli_runner):
    result = cli_runner.invoke(cli, ['--help'])
    assert result.exit_code == 0

def test_info_requires_config(cli_runner):
    result = cli_runner.invoke(cli, ['info'])
    assert result.exit_code != 0

@patch('geobands.geobands.init_logging')
def test_info_with_config(mock, cli_runner):
    result = cli_runner.invoke(cli, ['info', '--config', './example/geobands.ini'])
    assert result.exit_code == 0

@patch('geobands.geobands.init_logging')
def test_info_with_config_summarizes(mock, cli_runner, caplog):
    caplog.set_level('INFO', logger='geobands')
    cli_runner.invoke(cli, ['info', '--config', './example/geobands.ini'])

    for key in ['samples_file', 'cell_size', 'mode', 'num_bands', 'color_ramp', 'output_file']:
        assert key in caplog.text

@patch('geobands.geobands.process')
def test_process_requires_config_does_not_call_process(mock, cli_runner):
    result = cli_runner.invoke(cli, ['process'])
    assert not mock.called
    assert result.exit_code != 0

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.process')
def test_process_with_config_calls_process(process_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['process', '--config', './example/geobands.ini'])
    assert process_mock.called
    assert result.exit_code == 0

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.process')
def test_process_with_overrides(process_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['process', '-m', 'isolines', '-b', '3', '-o', './out.geojson',
                                     '--config', './example/geobands.ini'])

    assert process_mock.called
    args = process_mock.call_args.args
    assert len(args) == 1
    configuration = args[0]
    assert configuration.mode == 'isolines'
    assert configuration.num_bands == 3
    assert configuration.output_file == './out.geojson'
    assert result.exit_code == 0

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.process')
def test_process_rejects_unknown_mode(process_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['process', '-m', 'heatmap', '--config', './example/geobands.ini'])
    assert not process_mock.called
    assert result.exit_code != 0

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.process')
def test_process_with_invalid_configuration(process_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['process', '-b', '0', '--config', './example/geobands.ini'])
    assert not process_mock.called
    assert 'num_bands' in result.output
    assert result.exit_code == 1

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.process', side_effect=SinkWriteFailure('disk full'))
def test_process_failure_is_reported(process_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['process', '--config', './example/geobands.ini'])
    assert 'Unable to process data: disk full' in result.output
    assert result.exit_code == 1

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.synthesize')
def test_synthesize_with_options(synthesize_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['synthesize', '--bounds', '0', '1', '2', '3', '--spacing', '100',
                                     '-b', '4', '--seed', '9', '-o', 'synthetic.geojson'])
    assert result.exit_code == 0
    synthesize_mock.assert_called_once_with((0.0, 1.0, 2.0, 3.0), 100.0, 4, 'synthetic.geojson',
                                            mode='thresholds', seed=9)

@patch('geobands.geobands.init_logging')
@patch('geobands.geobands.synthesize', side_effect=ValueError('Grid spacing must be positive'))
def test_synthesize_failure_is_reported(synthesize_mock, logging_mock, cli_runner):
    result = cli_runner.invoke(cli, ['synthesize', '--spacing', '0'])
    assert 'Unable to synthesize data' in result.output
    assert result.exit_code == 1
