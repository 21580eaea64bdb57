"""
Conversions between grid space and geographic coordinates.

Grid space coordinates are (column, row) pairs that may be fractional, as
the crossing points found by marching squares are. The mapping to
longitude/latitude is affine and applies no rounding, so contour
boundaries keep the precision of the interpolation grid.
"""

from functools import lru_cache
from typing import Tuple

import numpy as np
import pyproj
import shapely

from geobands.models import Grid

_GEOD = pyproj.Geod(ellps="WGS84")


def project(grid: Grid, i, j) -> Tuple[float, float]:
    """
    Returns the (lng, lat) position of grid coordinate (i, j).

    Accepts scalars or numpy arrays.
    """
    return grid.origin_lng + i * grid.step_lng, grid.origin_lat + j * grid.step_lat


def unproject(grid: Grid, lng, lat) -> Tuple[float, float]:
    """Returns the grid coordinate (i, j) of a (lng, lat) position."""
    return (lng - grid.origin_lng) / grid.step_lng, (lat - grid.origin_lat) / grid.step_lat


def project_coords(grid: Grid, coords: np.ndarray) -> np.ndarray:
    lng, lat = project(grid, coords[:, 0], coords[:, 1])
    return np.column_stack((lng, lat))


def project_geometry(grid: Grid, geometry):
    """
    Returns a copy of a grid-space shapely geometry in geographic coordinates.

    Ring orientation is preserved because both steps are positive.
    """
    return shapely.transform(geometry, lambda coords: project_coords(grid, coords))


@lru_cache(maxsize=128)
def meters_per_degree(latitude: float) -> Tuple[float, float]:
    """
    Returns the length in meters of one degree of longitude and of latitude
    at the given latitude on the WGS84 ellipsoid.
    """
    _, _, lng_meters = _GEOD.inv(0.0, latitude, 1.0, latitude)
    south = max(-90.0, latitude - 0.5)
    north = min(90.0, latitude + 0.5)
    _, _, lat_meters = _GEOD.inv(0.0, south, 0.0, north)
    return lng_meters, lat_meters / (north - south)


def degree_steps(spacing_m: float, latitude: float) -> Tuple[float, float]:
    """
    Converts a spacing in meters into (step_lng, step_lat) degrees at the
    given latitude.
    """
    if spacing_m <= 0:
        raise ValueError(f'Grid spacing must be positive, got {spacing_m}')
    lng_meters, lat_meters = meters_per_degree(round(float(latitude), 6))
    if lng_meters <= 0:
        raise ValueError(f'Unable to size longitude steps at latitude {latitude}')
    return spacing_m / lng_meters, spacing_m / lat_meters
