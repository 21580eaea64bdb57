"""
Assembly of GeoJSON features from grid-space contours.

Each contour is projected to longitude/latitude and colored as it is
turned into a feature, so features can be produced lazily one at a time.
"""

from typing import Iterable, Iterator

from shapely.geometry import mapping

from geobands.colors import band_color_value, classify_color
from geobands.models import ContourGeometry, ContourKind, Grid, Style
from geobands.spatial.projection import project_geometry


def format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def feature_value(contour: ContourGeometry):
    """Isobands are labelled "low-high"; every other kind by its value."""
    if contour.kind is ContourKind.ISOBAND:
        return f'{format_number(contour.low)}-{format_number(contour.high)}'
    return contour.low


def feature(geometry, value, color, style: Style) -> dict:
    fill = color.with_opacity(style.opacity).packed if style.fill_format == 'packed' else color.hex
    return {
        'type': 'Feature',
        'geometry': mapping(geometry),
        'properties': {
            'value': value,
            'fill': fill,
            'fill-opacity': style.opacity,
            'opacity': style.opacity,
            'stroke': fill,
            'stroke-width': style.stroke_width,
            'stroke-opacity': style.stroke_opacity,
        },
    }


def contour_features(contours: Iterable[ContourGeometry],
                     grid: Grid,
                     min_value: float,
                     max_value: float,
                     style: Style) -> Iterator[dict]:
    """
    Yields one GeoJSON feature per non-empty contour.

    Bands and threshold regions are colored by the middle of their interval
    (capped at max_value); isolines and cells by their own value.
    """
    for contour in contours:
        if contour.is_empty:
            continue
        if contour.kind in (ContourKind.ISOBAND, ContourKind.THRESHOLD):
            color_value = band_color_value(contour.low, contour.high, max_value)
        else:
            color_value = contour.low
        color = classify_color(color_value, min_value, max_value, style.ramp)
        yield feature(project_geometry(grid, contour.geometry), feature_value(contour), color, style)
