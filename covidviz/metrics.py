"""Derived metrics over cumulative count series.

All functions are pure and operate on plain sequences of numbers:

* :func:`daily_deltas` turns a cumulative series into day-over-day
  increases (negative corrections are clamped to zero).
* :func:`average` is a NaN/None tolerant mean rounded to an integer.
* :func:`trend` compares two consecutive 7-entry windows and
  :func:`classify_trend` maps the difference to a label.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Sequence

from .config import ROLLING_WINDOW, TREND_THRESHOLD, TREND_WINDOW


class Trend(str, Enum):
    RISING = "Rising"
    FALLING = "Falling"
    STABLE = "Stable"

    def __str__(self) -> str:
        return self.value


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf."""
    return int(math.floor(value + 0.5))


def _is_valid(value: Optional[float]) -> bool:
    if value is None:
        return False
    try:
        return not math.isnan(value)
    except TypeError:
        return False


def daily_deltas(cumulative: Sequence[Optional[int]]) -> List[int]:
    """Return day-over-day increases; the first day is defined as 0."""
    if not cumulative:
        return []
    deltas = [0]
    for i in range(1, len(cumulative)):
        current = cumulative[i] or 0
        previous = cumulative[i - 1] or 0
        deltas.append(max(0, current - previous))
    return deltas


def average(values: Sequence[Optional[float]]) -> int:
    """Mean of the valid entries, rounded; 0 when nothing is valid."""
    valid = [v for v in values if _is_valid(v)]
    if not valid:
        return 0
    return round_half_up(sum(valid) / len(valid))


def rolling_average(values: Sequence[Optional[float]], window: int = ROLLING_WINDOW) -> int:
    return average(values[-window:]) if window > 0 else 0


def trend(values: Sequence[Optional[float]]) -> int:
    """Difference between the second and first 7-entry averages.

    Only the first 14 entries are considered.  Fewer than 7 entries
    yield 0; between 7 and 13 entries the second window is partial (and
    empty windows average to 0).
    """
    half = TREND_WINDOW // 2
    if len(values) < half:
        return 0
    first = average(values[0:half])
    second = average(values[half:TREND_WINDOW])
    return second - first


def classify_trend(value: float) -> Trend:
    if value > TREND_THRESHOLD:
        return Trend.RISING
    if value < -TREND_THRESHOLD:
        return Trend.FALLING
    return Trend.STABLE


def new_since_previous(series: Sequence[int]) -> int:
    """Latest value minus the one before it, floored at 0."""
    current = series[-1] if series else 0
    previous = series[-2] if len(series) >= 2 else 0
    return max(0, (current or 0) - (previous or 0))
