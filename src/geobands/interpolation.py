"""
Grid construction.

Scattered samples are interpolated onto a regular grid with inverse
distance weighting (IDW); already rasterized fields, such as a synthetic
elevation model, are wrapped into a Grid directly.
"""

import dataclasses
import logging
import math
from typing import Callable, Optional, Sequence

import numpy as np

from geobands import constants
from geobands.errors import InterpolationFailure
from geobands.models import Bounds, Grid, SampleSet
from geobands.spatial.projection import degree_steps

logger = logging.getLogger(__name__)

# Tolerates floating point error when counting how many steps fit in a span.
_SPAN_EPSILON = 1e-9


@dataclasses.dataclass(frozen=True)
class GridSpec:
    """Geometry of a grid: node count along each axis, origin and steps."""

    cols: int
    rows: int
    origin_lng: float
    origin_lat: float
    step_lng: float
    step_lat: float

    @classmethod
    def from_cell_size(cls, bounds: Bounds, cell_size: float,
                       units: str = constants.DEFAULT_CELL_SIZE_UNITS) -> 'GridSpec':
        """
        Lays nodes out from the south-west corner of bounds, one cell size
        apart, keeping every node inside the bounds.
        """
        if cell_size <= 0:
            raise ValueError(f'Cell size must be positive, got {cell_size}')
        min_lng, min_lat, max_lng, max_lat = bounds
        if units == 'degrees':
            step_lng = step_lat = float(cell_size)
        elif units in constants.METERS_PER_UNIT:
            spacing_m = cell_size * constants.METERS_PER_UNIT[units]
            step_lng, step_lat = degree_steps(spacing_m, (min_lat + max_lat) / 2)
        else:
            raise ValueError(f'Unknown cell size units {units}')

        return cls(
            _node_count(max_lng - min_lng, step_lng),
            _node_count(max_lat - min_lat, step_lat),
            min_lng,
            min_lat,
            step_lng,
            step_lat,
        )

    @classmethod
    def from_shape(cls, bounds: Bounds, cols: int, rows: int) -> 'GridSpec':
        """
        Spreads cols x rows nodes so that the outer nodes sit on the bounds.

        A single node along an axis has no spacing; its step falls back to the
        span, or one degree when the span is empty.
        """
        min_lng, min_lat, max_lng, max_lat = bounds
        return cls(
            cols,
            rows,
            min_lng,
            min_lat,
            _even_step(max_lng - min_lng, cols),
            _even_step(max_lat - min_lat, rows),
        )


def _node_count(span: float, step: float) -> int:
    return int(math.floor(span / step + _SPAN_EPSILON)) + 1


def _even_step(span: float, count: int) -> float:
    if count > 1:
        return span / (count - 1)
    return span if span > 0 else 1.0


def node_coordinates(spec):
    """Returns the longitudes of every column and latitudes of every row."""
    lngs = spec.origin_lng + np.arange(spec.cols) * spec.step_lng
    lats = spec.origin_lat + np.arange(spec.rows) * spec.step_lat
    return lngs, lats


def _haversine(lng1, lat1, lng2, lat2):
    """Great-circle distance on the unit sphere."""
    lng1, lat1, lng2, lat2 = map(np.radians, (lng1, lat1, lng2, lat2))
    a = (np.sin((lat2 - lat1) / 2) ** 2
         + np.cos(lat1) * np.cos(lat2) * np.sin((lng2 - lng1) / 2) ** 2)
    return 2 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def interpolate(sample_set: SampleSet, spec: GridSpec, weight: float = constants.DEFAULT_WEIGHT) -> Grid:
    """
    Estimates every grid node from the samples by inverse distance weighting.

        value(c) = sum(w_i * v_i) / sum(w_i),  w_i = 1 / distance(c, p_i) ** weight

    A node that coincides with a sample takes that sample's value exactly
    (the first such sample when several coincide). Cost is
    O(cols * rows * samples); rows are processed one at a time to bound
    memory.
    """
    if weight <= 0:
        raise ValueError(f'Weight exponent must be positive, got {weight}')

    sample_lngs = sample_set.lngs
    sample_lats = sample_set.lats
    sample_values = sample_set.values
    lngs, lats = node_coordinates(spec)
    values = np.empty((spec.rows, spec.cols), dtype=np.float64)

    logger.info(f'Interpolating {len(sample_values)} samples onto {spec.cols} x {spec.rows} grid')
    for j, lat in enumerate(lats):
        distances = _haversine(lngs[:, None], lat, sample_lngs[None, :], sample_lats[None, :])
        coincident = distances == 0.0
        with np.errstate(divide='ignore', invalid='ignore'):
            weights = 1.0 / distances ** weight
            weights[coincident] = 0.0
            row = (weights @ sample_values) / weights.sum(axis=1)

        exact = coincident.any(axis=1)
        if exact.any():
            row[exact] = sample_values[np.argmax(coincident[exact], axis=1)]
        values[j] = row

    return Grid(spec.cols, spec.rows, spec.origin_lng, spec.origin_lat,
                spec.step_lng, spec.step_lat, values)


def dense_grid(bounds: Bounds,
               spacing_m: float,
               values: Optional[Sequence[float]] = None,
               generator: Optional[Callable[[np.ndarray, np.ndarray], np.ndarray]] = None) -> Grid:
    """
    Wraps an already rasterized field into a Grid.

    The grid covers bounds with nodes spacing_m meters apart. Either pass
    `values`, a flat sequence in i + j * cols order, or `generator`, called
    with 2D longitude and latitude arrays of shape (rows, cols).
    """
    if (values is None) == (generator is None):
        raise ValueError('Provide exactly one of values or generator')

    spec = GridSpec.from_cell_size(bounds, spacing_m, 'meters')
    logger.info(f'Grid: {spec.cols} x {spec.rows} = {spec.cols * spec.rows:,} cells ({spacing_m}m spacing)')

    if generator is not None:
        lngs, lats = node_coordinates(spec)
        lng_grid, lat_grid = np.meshgrid(lngs, lats)
        values = generator(lng_grid, lat_grid)

    return Grid(spec.cols, spec.rows, spec.origin_lng, spec.origin_lat,
                spec.step_lng, spec.step_lat, values)


def synthetic_elevation(bounds: Bounds,
                        peaks=constants.SYNTHETIC_PEAKS,
                        base: float = constants.SYNTHETIC_BASE_ELEVATION,
                        noise: float = constants.SYNTHETIC_NOISE,
                        seed: Optional[int] = None) -> Callable[[np.ndarray, np.ndarray], np.ndarray]:
    """
    Returns a generator for dense_grid producing a hilly elevation field.

    Each peak is (fraction across, fraction up, height, falloff) relative to
    bounds and adds height * exp(-distance * falloff), distance measured in
    degrees. Uniform noise in [-noise/2, noise/2) is added and the result is
    clamped at zero.
    """
    min_lng, min_lat, max_lng, max_lat = bounds
    rng = np.random.default_rng(seed)

    def generate(lng_grid, lat_grid):
        elevation = np.full(lng_grid.shape, base, dtype=np.float64)
        for across, up, height, falloff in peaks:
            peak_lng = min_lng + (max_lng - min_lng) * across
            peak_lat = min_lat + (max_lat - min_lat) * up
            distance = np.hypot(lng_grid - peak_lng, lat_grid - peak_lat)
            elevation += height * np.exp(-distance * falloff)
        elevation += (rng.random(lng_grid.shape) - 0.5) * noise
        return np.maximum(elevation, 0.0)

    return generate


def grid_for_samples(sample_set: SampleSet, cell_size: float, units: str, weight: float) -> Grid:
    """Interpolates samples over their own bounding box."""
    spec = GridSpec.from_cell_size(sample_set.bounds, cell_size, units)
    if spec.cols < 2 or spec.rows < 2:
        raise InterpolationFailure(
            f'Samples span a {spec.cols} x {spec.rows} grid at cell size {cell_size} {units}; '
            f'at least 2 x 2 is needed'
        )
    return interpolate(sample_set, spec, weight)
