from __future__ import annotations

import math
from collections.abc import Sequence


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Population variance (divisor n)."""
    if not values:
        return 0.0
    centre = mean(values)
    return sum((value - centre) ** 2 for value in values) / len(values)


def stddev(values: Sequence[float]) -> float:
    var = variance(values)
    return math.sqrt(var) if var > 0 else 0.0


def coefficient_of_variation(values: Sequence[float]) -> float:
    centre = mean(values)
    if centre == 0:
        return 0.0
    return stddev(values) / centre


def percent_change(start: float, end: float) -> float:
    if start == 0:
        return 0.0
    return (end - start) / start * 100


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
