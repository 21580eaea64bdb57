"""
Marching squares contour extraction.

The grid is swept one cell at a time. A cell's four corners are compared
with a threshold, a corner counting as "above" when its value is >= the
threshold, and the resulting 4-bit case code selects how contour segments
cross the cell:

    bit 1: bottom-left    (i,     j)
    bit 2: bottom-right   (i + 1, j)
    bit 4: top-right      (i + 1, j + 1)
    bit 8: top-left       (i,     j + 1)

Segment end points lie on the cell edges, placed by linear interpolation
between the two corner values. A crossing is computed from its edge alone,
so neighbouring cells produce bit-identical shared points.

Saddle cells (codes 5 and 10, two diagonally opposite corners above) are
resolved with the cell centre, taken as the mean of the four corners: when
the centre is above the threshold the two above corners are joined through
the cell, otherwise they are kept apart. Isolines, threshold regions and
isobands all apply this rule, so their boundaries agree.

Three products are built on the sweep:

1. **isolines**: segments stitched across cells into polylines, closed
   rings or chains that end on the grid boundary.
2. **threshold regions**: the area where the field is >= a threshold, the
   union of the above part of every cell.
3. **isobands**: the area where low <= field < high, the region for low
   minus the region for high, holes included.
"""

import logging
from collections import defaultdict

import numpy as np
import shapely
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon, box

from geobands.errors import InterpolationFailure
from geobands.models import ContourGeometry, ContourKind, Grid
from geobands.thresholds import band_pairs, validate_thresholds

from .spatial_utils import ensure_counter_clockwise, polygon_parts

logger = logging.getLogger(__name__)

# Cell edges. Edge k runs from corner k to corner k + 1 going
# counter-clockwise around the cell.
BOTTOM, RIGHT, TOP, LEFT = range(4)

CORNER_BITS = (1, 2, 4, 8)
CORNER_OFFSETS = ((0, 0), (1, 0), (1, 1), (0, 1))

FULL = 15

# Edge pairs joined by a segment for every unambiguous case code.
SEGMENTS = {
    0: (),
    1: ((LEFT, BOTTOM),),
    2: ((BOTTOM, RIGHT),),
    3: ((LEFT, RIGHT),),
    4: ((RIGHT, TOP),),
    6: ((BOTTOM, TOP),),
    7: ((LEFT, TOP),),
    8: ((TOP, LEFT),),
    9: ((BOTTOM, TOP),),
    11: ((RIGHT, TOP),),
    12: ((LEFT, RIGHT),),
    13: ((BOTTOM, RIGHT),),
    14: ((LEFT, BOTTOM),),
    15: (),
}

# Saddle cases: (segments when joined, segments when separated).
SADDLES = {
    5: (((BOTTOM, RIGHT), (TOP, LEFT)), ((LEFT, BOTTOM), (RIGHT, TOP))),
    10: (((LEFT, BOTTOM), (RIGHT, TOP)), ((BOTTOM, RIGHT), (TOP, LEFT))),
}


def check_contourable(grid: Grid) -> None:
    if grid.cols < 2 or grid.rows < 2:
        raise InterpolationFailure(
            f'Contouring needs at least a 2 x 2 grid, got {grid.cols} x {grid.rows}'
        )


def case_codes(grid: Grid, threshold: float) -> np.ndarray:
    """
    Returns the case code of every cell as a (rows - 1, cols - 1) array.
    """
    above = (grid.values >= threshold).astype(np.uint8)
    return (above[:-1, :-1] * 1
            + above[:-1, 1:] * 2
            + above[1:, 1:] * 4
            + above[1:, :-1] * 8)


def saddle_joined(grid: Grid, i: int, j: int, threshold: float) -> bool:
    v = grid.values
    centre = (v[j, i] + v[j, i + 1] + v[j + 1, i + 1] + v[j + 1, i]) / 4.0
    return bool(centre >= threshold)


def cell_segments(code: int, joined: bool = False):
    """Returns the (edge, edge) pairs crossed by contour segments in a cell."""
    if code in SADDLES:
        joined_segments, separated_segments = SADDLES[code]
        return joined_segments if joined else separated_segments
    return SEGMENTS[code]


def edge_key(i: int, j: int, edge: int):
    """
    Identifies a cell edge independently of the cell it is seen from.

    ('h', i, j) is the edge from node (i, j) to (i + 1, j) and ('v', i, j)
    the edge from node (i, j) to (i, j + 1).
    """
    if edge == BOTTOM:
        return ('h', i, j)
    if edge == TOP:
        return ('h', i, j + 1)
    if edge == LEFT:
        return ('v', i, j)
    return ('v', i + 1, j)


def crossing(grid: Grid, key, threshold: float):
    """Returns the grid-space point where the threshold crosses an edge."""
    axis, i, j = key
    v = grid.values
    if axis == 'h':
        v0, v1 = v[j, i], v[j, i + 1]
        return (float(i + (threshold - v0) / (v1 - v0)), float(j))
    v0, v1 = v[j, i], v[j + 1, i]
    return (float(i), float(j + (threshold - v0) / (v1 - v0)))


def _partial_cells(codes: np.ndarray):
    rows, cols = np.nonzero((codes != 0) & (codes != FULL))
    for j, i in zip(rows.tolist(), cols.tolist()):
        yield i, j, int(codes[j, i])


# -------------------------------------------------------------------
# Isolines
# -------------------------------------------------------------------

def isoline(grid: Grid, threshold: float) -> ContourGeometry:
    """
    Returns the isoline for one threshold as a MultiLineString in grid space.

    Closed rings repeat their first point at the end; chains that reach the
    grid boundary stay open.
    """
    check_contourable(grid)
    links = defaultdict(list)

    for i, j, code in _partial_cells(case_codes(grid, threshold)):
        joined = code in SADDLES and saddle_joined(grid, i, j, threshold)
        for a, b in cell_segments(code, joined):
            ka, kb = edge_key(i, j, a), edge_key(i, j, b)
            links[ka].append(kb)
            links[kb].append(ka)

    lines = []
    for chain in stitch(links):
        line = LineString([crossing(grid, key, threshold) for key in chain])
        if line.length > 0:
            lines.append(line)

    return ContourGeometry(ContourKind.ISOLINE, threshold, MultiLineString(lines))


def stitch(links) -> list:
    """
    Joins segments into chains of edge keys.

    Every edge is shared by at most two cells and used by at most one segment
    in each, so each key has one or two neighbours. Chains starting at keys
    with a single neighbour end on the grid boundary; what remains are loops.
    """
    seen = set()
    chains = []
    open_ends = [key for key, neighbours in links.items() if len(neighbours) == 1]
    for start in open_ends + list(links):
        if start not in seen:
            chains.append(_trace(start, links, seen))
    return chains


def _trace(start, links, seen) -> list:
    chain = [start]
    seen.add(start)
    current = start
    while True:
        following = [key for key in links[current] if key not in seen]
        if not following:
            if len(chain) > 2 and start in links[current]:
                chain.append(start)
            return chain
        current = following[0]
        seen.add(current)
        chain.append(current)


def isolines(grid: Grid, thresholds):
    """Returns a generator of non-empty isolines, one per threshold."""
    check_contourable(grid)
    thresholds = validate_thresholds(thresholds)
    return (c for c in (isoline(grid, t) for t in thresholds) if not c.is_empty)


# -------------------------------------------------------------------
# Filled regions
# -------------------------------------------------------------------

def cell_fragments(grid: Grid, i: int, j: int, code: int, threshold: float) -> list:
    """
    Returns the part of cell (i, j) that is above the threshold as polygons.

    Walking the cell counter-clockwise and collecting above corners and edge
    crossings gives the fragment directly; a separated saddle gives one
    triangle per above corner instead.
    """
    above = [bool(code & bit) for bit in CORNER_BITS]

    def corner(k):
        di, dj = CORNER_OFFSETS[k]
        return (float(i + di), float(j + dj))

    def cross(k):
        return crossing(grid, edge_key(i, j, k), threshold)

    if code in SADDLES and not saddle_joined(grid, i, j, threshold):
        return [Polygon([cross((k - 1) % 4), corner(k), cross(k)])
                for k in range(4) if above[k]]

    ring = []
    for k in range(4):
        if above[k]:
            ring.append(corner(k))
        if above[k] != above[(k + 1) % 4]:
            ring.append(cross(k))
    return [Polygon(ring)]


def _full_runs(mask: np.ndarray):
    """Yields (start, stop) column ranges of consecutive True values."""
    padded = np.concatenate(([0], mask.astype(np.int8), [0]))
    changes = np.flatnonzero(np.diff(padded))
    return zip(changes[::2].tolist(), changes[1::2].tolist())


def threshold_region(grid: Grid, threshold: float) -> MultiPolygon:
    """
    Returns the grid-space region where the field is >= threshold.

    Fully covered cells are merged into one rectangle per row run before the
    union so that only cells crossed by the contour add vertices.
    """
    check_contourable(grid)
    codes = case_codes(grid, threshold)
    pieces = []

    for j, row in enumerate(codes == FULL):
        pieces.extend(box(float(start), float(j), float(stop), float(j + 1))
                      for start, stop in _full_runs(row))
    for i, j, code in _partial_cells(codes):
        pieces.extend(cell_fragments(grid, i, j, code, threshold))

    pieces = [p for p in pieces if p.area > 0]
    if not pieces:
        return MultiPolygon()
    return ensure_counter_clockwise(polygon_parts(shapely.unary_union(pieces)))


def filled_contours(grid: Grid, thresholds):
    """
    Returns a generator of non-empty threshold regions.

    Each region keeps the next threshold as `high` so that callers can
    color it by the middle of the interval it starts.
    """
    check_contourable(grid)
    thresholds = validate_thresholds(thresholds)
    return _filled_contours(grid, thresholds)


def _filled_contours(grid, thresholds):
    following = thresholds[1:] + [None]
    for threshold, high in zip(thresholds, following):
        region = threshold_region(grid, threshold)
        if not region.is_empty:
            yield ContourGeometry(ContourKind.THRESHOLD, threshold, region, high)


def isobands(grid: Grid, thresholds):
    """
    Returns a generator of non-empty isobands for consecutive thresholds.

    A band covers low <= value < high. Regions are computed once per
    threshold and each is reused as the upper bound of one band and the
    lower bound of the next.
    """
    check_contourable(grid)
    thresholds = validate_thresholds(thresholds, minimum=2)
    return _isobands(grid, thresholds)


def _isobands(grid, thresholds):
    lower = threshold_region(grid, thresholds[0])
    for low, high in band_pairs(thresholds):
        upper = threshold_region(grid, high)
        band = ensure_counter_clockwise(polygon_parts(lower.difference(upper)))
        if band.is_empty:
            logger.debug(f'Band {low}-{high} is empty')
        else:
            yield ContourGeometry(ContourKind.ISOBAND, low, band, high)
        lower = upper


# -------------------------------------------------------------------
# Grid cells
# -------------------------------------------------------------------

def grid_cells(grid: Grid):
    """
    Yields one square per grid node, one step wide and centred on the node.
    """
    for j in range(grid.rows):
        for i in range(grid.cols):
            yield ContourGeometry(
                ContourKind.CELL,
                grid.value(i, j),
                box(i - 0.5, j - 0.5, i + 0.5, j + 0.5),
            )


EXTRACTORS = {
    'isobands': isobands,
    'thresholds': filled_contours,
    'isolines': isolines,
}


def extract_contours(grid: Grid, thresholds, mode: str = 'isobands'):
    """
    Returns a generator of contour geometries for the given mode.

    The grid and thresholds are checked before the generator is returned, so
    a malformed grid fails here rather than midway through a stream.
    """
    if mode == 'cells':
        return grid_cells(grid)
    if mode not in EXTRACTORS:
        raise ValueError(f'Unknown contour mode {mode}')
    return EXTRACTORS[mode](grid, thresholds)
