"""
Score arithmetic shared by the records and the reducers.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (JavaScript Math.round semantics)."""
    return math.floor(value + 0.5)


def clamp_percent(value: Any) -> int | None:
    """Clamp a numeric value into [0, 100]; None for anything that is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return min(100, max(0, int(value)))


def average_of_attempted(category_scores: Mapping[Any, int]) -> int:
    """Rounded mean of the nonzero category scores; 0 when nothing was attempted."""
    attempted = [score for score in category_scores.values() if score > 0]
    if not attempted:
        return 0
    return round_half_up(sum(attempted) / len(attempted))
