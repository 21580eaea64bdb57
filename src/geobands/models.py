"""
Data models for the geobands package.

This module contains the dataclasses passed between the pipeline stages:
samples, the interpolated grid, contour geometries in grid space, styling
options, diagnostics and the summary of a run.
"""

import dataclasses
import logging
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

import numpy as np
from returns.maybe import Maybe

from geobands.errors import InterpolationFailure

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float, float, float]


@dataclasses.dataclass(frozen=True)
class Sample:
    """A validated scalar measurement at a geographic position."""

    lng: float
    lat: float
    value: float


@dataclasses.dataclass(frozen=True)
class SampleSet:
    """
    The clean output of ingestion.

    Holds the accepted samples, how many raw records were accepted and
    dropped, and the observed value range across the accepted samples.
    """

    samples: Tuple[Sample, ...]
    accepted: int
    dropped: int
    min_value: float
    max_value: float

    @property
    def lngs(self) -> np.ndarray:
        return np.array([s.lng for s in self.samples], dtype=np.float64)

    @property
    def lats(self) -> np.ndarray:
        return np.array([s.lat for s in self.samples], dtype=np.float64)

    @property
    def values(self) -> np.ndarray:
        return np.array([s.value for s in self.samples], dtype=np.float64)

    @property
    def bounds(self) -> Bounds:
        lngs = [s.lng for s in self.samples]
        lats = [s.lat for s in self.samples]
        return (min(lngs), min(lats), max(lngs), max(lats))


class Grid:
    """
    A regular grid of scalar values.

    Node (i, j) sits at (origin_lng + i * step_lng, origin_lat + j * step_lat)
    and its value is stored at values[j, i], which is index i + j * cols of
    the flat view.
    """

    def __init__(self, cols, rows, origin_lng, origin_lat, step_lng, step_lat, values):
        if cols < 1 or rows < 1:
            raise InterpolationFailure(f'Grid must have at least one column and row, got {cols}x{rows}')
        if not (step_lng > 0 and step_lat > 0):
            raise InterpolationFailure(f'Grid steps must be positive, got ({step_lng}, {step_lat})')

        array = np.asarray(values, dtype=np.float64)
        if array.size != cols * rows:
            raise InterpolationFailure(
                f'Grid of {cols}x{rows} needs {cols * rows} values, got {array.size}'
            )
        array = array.reshape(rows, cols)
        if not np.all(np.isfinite(array)):
            raise InterpolationFailure('Grid values must all be finite')

        self.cols = int(cols)
        self.rows = int(rows)
        self.origin_lng = float(origin_lng)
        self.origin_lat = float(origin_lat)
        self.step_lng = float(step_lng)
        self.step_lat = float(step_lat)
        self.values = array

    @classmethod
    def from_flat(cls, cols, rows, origin_lng, origin_lat, step_lng, step_lat, values: Sequence[float]):
        return cls(cols, rows, origin_lng, origin_lat, step_lng, step_lat, values)

    @property
    def flat(self) -> np.ndarray:
        return self.values.ravel()

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.cols, self.rows)

    @property
    def min_value(self) -> float:
        return float(self.values.min())

    @property
    def max_value(self) -> float:
        return float(self.values.max())

    def value(self, i: int, j: int) -> float:
        return float(self.values[j, i])

    def __repr__(self):
        return (f'Grid(cols={self.cols}, rows={self.rows}, origin=({self.origin_lng}, {self.origin_lat}), '
                f'step=({self.step_lng}, {self.step_lat}))')


class ContourKind(Enum):
    """Specifies what a contour geometry represents."""

    ISOLINE = "isoline"  # Polylines where the field equals a threshold
    THRESHOLD = "threshold"  # Region where the field is >= a threshold
    ISOBAND = "isoband"  # Region where low <= field < high
    CELL = "cell"  # One grid node's square


@dataclasses.dataclass(frozen=True)
class ContourGeometry:
    """
    A contour level or band in grid space.

    Coordinates are fractional (column, row) positions. Polygon exteriors
    are counter-clockwise and holes clockwise.
    """

    kind: ContourKind
    low: float
    geometry: Any  # shapely geometry
    high: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.geometry is None or self.geometry.is_empty


@dataclasses.dataclass(frozen=True)
class Style:
    """How features are colored."""

    ramp: Tuple[Tuple[int, ...], ...]
    opacity: float = 0.8
    fill_format: str = 'hex'
    stroke_width: float = 0
    stroke_opacity: float = 0


@dataclasses.dataclass(frozen=True)
class Diagnostic:
    category: type
    message: str
    details: dict = dataclasses.field(default_factory=dict)


@dataclasses.dataclass
class Diagnostics:
    """
    Warnings collected while a run executes.

    Each warning is kept as a structured Diagnostic on the run's result and
    also logged.
    """

    entries: list = dataclasses.field(default_factory=list)

    def warn(self, category: type, message: str, **details) -> Diagnostic:
        entry = Diagnostic(category, message, details)
        self.entries.append(entry)
        logger.warning(f'{category.__name__}: {message}')
        return entry

    def has(self, category: type) -> bool:
        return any(issubclass(e.category, category) for e in self.entries)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


@dataclasses.dataclass
class RunResult:
    """Summary of one pipeline run."""

    features: int = 0
    bytes_written: int = 0
    samples: Maybe[SampleSet] = Maybe.empty
    grid_shape: Maybe[Tuple[int, int]] = Maybe.empty
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    thresholds: list = dataclasses.field(default_factory=list)
    diagnostics: Diagnostics = dataclasses.field(default_factory=Diagnostics)
    output: Optional[str] = None
