"""
Value to color classification over a piecewise-linear color ramp.
"""

import dataclasses
import math
from typing import Optional, Sequence, Tuple

from geobands import constants

Ramp = Tuple[Tuple[int, ...], ...]


@dataclasses.dataclass(frozen=True)
class Color:
    """
    An RGBA color with integer channels.

    `hex` and `packed` are both derived from the same rounded channels, so
    the two representations always agree.
    """

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def hex(self) -> str:
        return f'#{self.r:02x}{self.g:02x}{self.b:02x}'

    @property
    def packed(self) -> int:
        """The color as 0xRRGGBBAA."""
        return (self.r << 24) | (self.g << 16) | (self.b << 8) | self.a

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def from_packed(cls, value: int) -> 'Color':
        return cls((value >> 24) & 0xFF, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def with_opacity(self, opacity: float) -> 'Color':
        return dataclasses.replace(self, a=round_half_up(opacity * 255))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def validate_ramp(ramp: Sequence[Sequence[int]]) -> Ramp:
    """
    Returns the ramp as a tuple of tuples, or raises ValueError when it is
    empty or a stop is not 3 or 4 channels in 0..255.
    """
    stops = tuple(tuple(int(c) for c in stop) for stop in ramp or ())
    if not stops:
        raise ValueError('Color ramp must have at least one stop')
    for stop in stops:
        if len(stop) not in (3, 4) or not all(0 <= c <= 255 for c in stop):
            raise ValueError(f'Invalid color stop {stop}')
    return stops


def ramp_by_name(name: str) -> Ramp:
    try:
        return constants.COLOR_RAMPS[name]
    except KeyError:
        raise ValueError(f'Unknown color ramp {name}; choose from {", ".join(constants.COLOR_RAMPS)}')


def _as_color(channels: Sequence[int]) -> Color:
    return Color(*channels) if len(channels) == 4 else Color(*channels, 255)


def classify_color(value: float, min_value: float, max_value: float, ramp: Ramp) -> Color:
    """
    Maps a value within [min_value, max_value] onto the ramp.

        t = clamp((value - min_value) / (max_value - min_value), 0, 1)

    The stops are spread evenly over t; the result blends the two stops
    around t channel by channel, rounded half up. A degenerate range or a
    single-stop ramp always gives the first stop.
    """
    if max_value == min_value or len(ramp) == 1:
        return _as_color(ramp[0])

    t = max(0.0, min(1.0, (value - min_value) / (max_value - min_value)))
    scaled = t * (len(ramp) - 1)
    idx = min(int(math.floor(scaled)), len(ramp) - 2)
    frac = scaled - idx

    lower, upper = _as_color(ramp[idx]).rgba, _as_color(ramp[idx + 1]).rgba
    return Color(*(round_half_up(c1 + (c2 - c1) * frac) for c1, c2 in zip(lower, upper)))


def band_color_value(low: float, high: Optional[float], max_value: float) -> float:
    """
    The value a band is colored by: its midpoint, never above the observed
    maximum. Single-valued levels use their own value.
    """
    if high is None:
        return low
    return min((low + high) / 2.0, max_value)
