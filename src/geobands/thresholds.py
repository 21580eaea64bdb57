import math
from typing import List, Sequence, Tuple


def evenly_spaced_thresholds(min_value: float, max_value: float, num_bands: int) -> List[float]:
    """
    Returns num_bands + 1 evenly spaced thresholds from min_value to max_value.

    The last threshold is exactly max_value. Thresholds that floating point
    spacing cannot tell apart from their predecessor are dropped, so a very
    narrow range gives fewer. An empty list is returned when the range is
    degenerate (max_value <= min_value, or fewer than two distinct
    thresholds), since no strictly increasing list can span it.
    """
    if num_bands < 1:
        raise ValueError(f'Number of bands must be at least 1, got {num_bands}')
    if not max_value > min_value:
        return []

    step = (max_value - min_value) / num_bands
    thresholds = []
    for t in (min_value + k * step for k in range(num_bands)):
        if not thresholds or t > thresholds[-1]:
            thresholds.append(t)
    # float spacing can collapse thresholds onto each other or onto max_value
    while thresholds and thresholds[-1] >= max_value:
        thresholds.pop()
    thresholds.append(max_value)
    return thresholds if len(thresholds) > 1 else []


def validate_thresholds(thresholds: Sequence[float], minimum: int = 1) -> List[float]:
    """
    Returns the thresholds as floats, or raises ValueError when they are not
    finite and strictly increasing or there are fewer than `minimum`.
    """
    values = [float(t) for t in thresholds]
    if len(values) < minimum:
        raise ValueError(f'At least {minimum} thresholds are required, got {len(values)}')
    if not all(math.isfinite(t) for t in values):
        raise ValueError(f'Thresholds must be finite: {values}')
    if any(b <= a for a, b in zip(values, values[1:])):
        raise ValueError(f'Thresholds must be strictly increasing: {values}')
    return values


def parse_thresholds(text: str) -> List[float]:
    """Parses a comma separated threshold list; blank text gives []."""
    return [float(part) for part in text.split(',') if part.strip()]


def band_pairs(thresholds: Sequence[float]) -> List[Tuple[float, float]]:
    """n + 1 thresholds give n (low, high) bands."""
    return list(zip(thresholds, thresholds[1:]))
