"""
Sample ingestion.

Raw records come from readers or library callers in whatever shape they
have; caller-supplied accessors pull a position and a value out of each
one. Records that do not yield a finite 2D position and a finite numeric
value are dropped and counted.
"""

import logging
import math
from numbers import Real
from typing import Any, Callable, Iterable, Optional, Tuple

import numpy as np
from returns.maybe import Maybe, Nothing, Some

from geobands import constants
from geobands.errors import InsufficientSamples, InvalidSample
from geobands.models import Diagnostics, Sample, SampleSet

logger = logging.getLogger(__name__)


def default_position(record: Any) -> Any:
    return record['position']


def default_value(record: Any) -> Any:
    return record['value']


def _finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_record(record: Any,
                    get_position: Callable[[Any], Any] = default_position,
                    get_value: Callable[[Any], Any] = default_value) -> Sample:
    """
    Returns a Sample for the record or raises InvalidSample.

    The position must be a 2-element sequence of finite numbers and the value
    a finite number. Accessor lookups that fail count as invalid records.
    """
    try:
        position = get_position(record)
        value = get_value(record)
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise InvalidSample(f'Unable to read record: {e}') from e

    if not isinstance(position, (list, tuple, np.ndarray)) or len(position) != 2:
        raise InvalidSample(f'Position must have two coordinates: {position!r}')
    lng, lat = position[0], position[1]
    if not (_finite_number(lng) and _finite_number(lat)):
        raise InvalidSample(f'Position coordinates must be finite numbers: {position!r}')
    if not _finite_number(value):
        raise InvalidSample(f'Value must be a finite number: {value!r}')

    return Sample(float(lng), float(lat), float(value))


def ingest(records: Iterable[Any],
           diagnostics: Optional[Diagnostics] = None,
           get_position: Callable[[Any], Any] = default_position,
           get_value: Callable[[Any], Any] = default_value,
           minimum: int = constants.MINIMUM_SAMPLES) -> Maybe[SampleSet]:
    """
    Validates raw records into a SampleSet.

    Returns Nothing, and records an InsufficientSamples diagnostic, when
    fewer than `minimum` records are valid.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    samples = []
    dropped = 0

    for record in (records if records is not None else []):
        try:
            samples.append(validate_record(record, get_position, get_value))
        except InvalidSample:
            dropped += 1

    logger.info(f'Accepted {len(samples)} samples, dropped {dropped}')

    if len(samples) < minimum:
        diagnostics.warn(
            InsufficientSamples,
            f'Need at least {minimum} valid samples, found {len(samples)}',
            accepted=len(samples),
            dropped=dropped,
        )
        return Nothing

    min_value, max_value = _value_range(samples)
    return Some(SampleSet(tuple(samples), len(samples), dropped, min_value, max_value))


def _value_range(samples) -> Tuple[float, float]:
    values = [s.value for s in samples]
    return min(values), max(values)
