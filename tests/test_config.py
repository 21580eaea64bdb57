import dataclasses
from configparser import ConfigParser, ExtendedInterpolation
from unittest.mock import patch

import pytest

from geobands import config, constants

# Unit tests for the 'config' module functions.
#
# The test boundary is the config module's interface with the filesystem, so
# in addition to testing the config module's behavior, the tests should mock
# filesystem checks and assert that config functions handle their results.


@pytest.fixture
def expected_keys():
    return set(
        [
            "samples_file",
            "longitude_field",
            "latitude_field",
            "value_field",
            "cell_size",
            "cell_size_units",
            "weight",
            "mode",
            "num_bands",
            "thresholds",
            "color_ramp",
            "opacity",
            "fill_format",
            "stroke_width",
            "output_file",
        ]
    )


@pytest.fixture
def cfg_parser():
    cp = ConfigParser(interpolation=ExtendedInterpolation())
    cp["Source"] = {
        "samples_file": "/data/stations.csv",
        "value_field": "depth",
    }
    cp["Grid"] = {"cell_size": "250", "cell_size_units": "meters"}
    cp["Contours"] = {"mode": "thresholds", "thresholds": "0, 10, 25"}
    cp["Style"] = {"opacity": "0.5"}
    cp["Destination"] = {"output_file": "/output/${Source:value_field}.geojson"}
    return cp


def test_config_parser_without_filename():
    with pytest.raises(ValueError):
        config.config_parser_factory(None)


def test_config_parser_with_missing_file(tmp_path):
    with pytest.raises(ValueError):
        config.config_parser_factory(str(tmp_path / "nope.ini"))


@patch("geobands.config.os.path.exists", return_value=True)
def test_config_parser_return_type(mock):
    result = config.config_parser_factory("foo.ini")
    assert isinstance(result, ConfigParser)


def test_config_from_config_parser(cfg_parser, expected_keys):
    cfg = config.configuration(cfg_parser, {})
    assert isinstance(cfg, config.Config)
    assert set(cfg.__dict__) == expected_keys


def test_config_values(cfg_parser):
    cfg = config.configuration(cfg_parser, {})
    assert cfg.samples_file == "/data/stations.csv"
    assert cfg.value_field == "depth"
    assert cfg.cell_size == 250.0
    assert cfg.cell_size_units == "meters"
    assert cfg.mode == "thresholds"
    assert cfg.thresholds == [0.0, 10.0, 25.0]
    assert cfg.opacity == 0.5


def test_config_interpolates_other_sections(cfg_parser):
    cfg = config.configuration(cfg_parser, {})
    assert cfg.output_file == "/output/depth.geojson"


def test_config_with_overrides(cfg_parser):
    overrides = {"mode": "isolines", "num_bands": 4, "output_file": None}
    cfg = config.configuration(cfg_parser, overrides)
    assert cfg.mode == "isolines"
    assert cfg.num_bands == 4
    assert cfg.output_file == "/output/depth.geojson"


def test_config_creates_missing_sections():
    cp = ConfigParser(interpolation=ExtendedInterpolation())
    cp["Source"] = {"samples_file": "samples.csv"}
    cfg = config.configuration(cp, {})
    assert cfg.mode == constants.DEFAULT_MODE
    assert cfg.output_file == constants.DEFAULT_OUTPUT_FILE


def test_config_without_samples_file():
    with pytest.raises(ValueError):
        config.configuration(ConfigParser(), {})


def test_config_with_bad_number(cfg_parser):
    cfg_parser.set("Grid", "cell_size", "tiny")
    with pytest.raises(ValueError):
        config.configuration(cfg_parser, {})


def test_get_configuration_value(cfg_parser):
    result = config._get_configuration_value("Source", "samples_file", str, cfg_parser, {})
    assert result == cfg_parser.get("Source", "samples_file")


def test_get_configuration_value_with_override(cfg_parser):
    overrides = {"samples_file": "foobar"}
    result = config._get_configuration_value("Source", "samples_file", str, cfg_parser, overrides)
    assert result == overrides["samples_file"]


@pytest.mark.parametrize(
    "section,option,expected",
    [
        ("Source", "longitude_field", constants.DEFAULT_LONGITUDE_FIELD),
        ("Source", "latitude_field", constants.DEFAULT_LATITUDE_FIELD),
        ("Grid", "weight", constants.DEFAULT_WEIGHT),
        ("Grid", "cell_size", constants.DEFAULT_CELL_SIZE),
        ("Contours", "num_bands", constants.DEFAULT_NUM_BANDS),
        ("Contours", "thresholds", []),
        ("Style", "color_ramp", constants.DEFAULT_COLOR_RAMP),
        ("Style", "fill_format", constants.DEFAULT_FILL_FORMAT),
        ("Style", "stroke_width", constants.DEFAULT_STROKE_WIDTH),
    ],
)
def test_configuration_has_good_defaults(cfg_parser, section, option, expected):
    cfg_parser.remove_option(section, option)
    result = config.configuration(cfg_parser, {})
    result_dict = dataclasses.asdict(result)
    assert result_dict[option] == expected


def test_style_from_config(cfg_parser):
    style = config.configuration(cfg_parser, {}).style()
    assert style.ramp == constants.DEFAULT_COLOR_RANGE
    assert style.opacity == 0.5
    assert style.fill_format == "hex"


@patch("geobands.config.os.path.isdir", return_value=True)
@patch("geobands.config.os.path.exists", return_value=True)
def test_validate_with_valid_checks(m1, m2, cfg_parser):
    cfg = config.configuration(cfg_parser, {})
    valid, errors = config.validate(cfg)
    assert valid
    assert errors == []


@patch("geobands.config.os.path.isdir", return_value=False)
@patch("geobands.config.os.path.exists", return_value=False)
def test_validate_with_invalid_checks(m1, m2, cfg_parser):
    cfg = config.configuration(cfg_parser, {})
    cfg = dataclasses.replace(cfg, weight=0, mode="heatmap", opacity=1.5, thresholds=[5, 1])
    valid, errors = config.validate(cfg)
    assert not valid
    assert len(errors) == 6


def test_validate_example_configuration():
    cfg = config.configuration(config.config_parser_factory("./example/geobands.ini"), {})
    valid, errors = config.validate(cfg)
    assert valid, errors


def test_show_logs_every_value(cfg_parser, caplog):
    caplog.set_level("INFO", logger=constants.ROOT_LOGGER)
    config.configuration(cfg_parser, {}).show()
    assert "samples_file" in caplog.text
    assert "output_file" in caplog.text
