import pytest

from geobands import constants
from geobands.colors import (Color, band_color_value, classify_color, ramp_by_name, round_half_up,
                             validate_ramp)

# Unit tests for the 'colors' module functions.


@pytest.fixture
def two_stops():
    return ((0, 0, 0), (255, 255, 255))

def test_minimum_is_first_stop():
    color = classify_color(0, 0, 100, constants.DEFAULT_COLOR_RANGE)
    assert color.rgba[:3] == constants.DEFAULT_COLOR_RANGE[0]

def test_maximum_is_last_stop():
    color = classify_color(100, 0, 100, constants.DEFAULT_COLOR_RANGE)
    assert color.rgba[:3] == constants.DEFAULT_COLOR_RANGE[-1]

def test_values_outside_range_are_clamped(two_stops):
    assert classify_color(-50, 0, 100, two_stops) == Color(0, 0, 0)
    assert classify_color(500, 0, 100, two_stops) == Color(255, 255, 255)

def test_midpoint_blends_and_rounds_half_up(two_stops):
    # 127.5 rounds up
    assert classify_color(50, 0, 100, two_stops) == Color(128, 128, 128)

def test_blend_between_neighbouring_stops():
    ramp = ((0, 0, 0), (100, 0, 0), (100, 200, 0))
    assert classify_color(75, 0, 100, ramp) == Color(100, 100, 0)

def test_flat_range_gives_first_stop():
    color = classify_color(7, 7, 7, constants.DEFAULT_COLOR_RANGE)
    assert color.rgba[:3] == constants.DEFAULT_COLOR_RANGE[0]

def test_single_stop_ramp():
    assert classify_color(50, 0, 100, ((10, 20, 30),)) == Color(10, 20, 30)

def test_ramp_with_alpha():
    ramp = ((0, 0, 0, 0), (0, 0, 0, 255))
    assert classify_color(100, 0, 100, ramp).a == 255
    assert classify_color(0, 0, 100, ramp).a == 0

def test_hex_and_packed_agree():
    color = Color(1, 171, 255)
    assert color.hex == '#01abff'
    assert color.packed == 0x01abffff
    assert Color.from_packed(color.packed) == color

def test_with_opacity_sets_alpha():
    assert Color(10, 20, 30).with_opacity(0.5).a == 128
    assert Color(10, 20, 30).with_opacity(0.8).packed & 0xFF == 204

@pytest.mark.parametrize("x,expected", [(0.5, 1), (1.49, 1), (2.5, 3), (254.5, 255), (0.0, 0)])
def test_round_half_up(x, expected):
    assert round_half_up(x) == expected

def test_ramp_by_name():
    assert ramp_by_name('elevation') == constants.ELEVATION_COLOR_RANGE
    assert len(ramp_by_name('default')) == 12

def test_unknown_ramp():
    with pytest.raises(ValueError):
        ramp_by_name('rainbow')

def test_validate_ramp():
    assert validate_ramp([[1, 2, 3]]) == ((1, 2, 3),)

@pytest.mark.parametrize("ramp", [[], None, [[1, 2]], [[0, 0, 300]]])
def test_validate_ramp_rejects(ramp):
    with pytest.raises(ValueError):
        validate_ramp(ramp)

def test_band_color_value_is_midpoint():
    assert band_color_value(10, 20, 100) == 15

def test_band_color_value_is_capped_at_maximum():
    assert band_color_value(90, 120, 100) == 100

def test_band_color_value_without_upper_bound():
    assert band_color_value(42, None, 100) == 42
