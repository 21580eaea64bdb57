"""
Utility functions for contour geometry operations.

This module contains shared helpers used by the contour extractor to
normalize the output of shapely overlay operations into consistently
wound polygon sets.
"""

import logging

from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.polygon import orient

logger = logging.getLogger(__name__)


def polygon_parts(geom) -> MultiPolygon:
    """
    Collect the polygonal parts of a geometry into a MultiPolygon.

    Overlay operations can return a Polygon, a MultiPolygon or a
    GeometryCollection mixing polygons with degenerate lines or points where
    regions only touch. Only polygons with a positive area are kept.

    Parameters:
    -----------
    geom : shapely geometry
        Result of a union or difference

    Returns:
    --------
    shapely.geometry.MultiPolygon : The polygonal parts, possibly empty
    """
    if geom is None or geom.is_empty:
        return MultiPolygon()

    if isinstance(geom, Polygon):
        candidates = [geom]
    elif isinstance(geom, (MultiPolygon, GeometryCollection)):
        candidates = []
        for part in geom.geoms:
            candidates.extend(polygon_parts(part).geoms)
    else:
        candidates = []

    return MultiPolygon([p for p in candidates if p.area > 0])


def ensure_counter_clockwise(geom: MultiPolygon) -> MultiPolygon:
    """
    Ensure every polygon has a counter-clockwise exterior and clockwise holes.

    Parameters:
    -----------
    geom : shapely.geometry.MultiPolygon
        Polygons to check and potentially reorient

    Returns:
    --------
    shapely.geometry.MultiPolygon : Polygons with the standard winding
    """
    if geom.is_empty:
        return geom

    # sign=1.0 ensures counter-clockwise exterior, clockwise holes
    return MultiPolygon([orient(p, sign=1.0) for p in geom.geoms])
