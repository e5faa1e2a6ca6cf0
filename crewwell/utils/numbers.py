from __future__ import annotations

import math
from typing import Iterable, Optional


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """
    Round .5 upwards (2.5 -> 3, -2.5 -> -2) instead of Python's round-half-to-even.
    """
    return int(math.floor(value + 0.5))


def round_1dp(value: float) -> float:
    return round_half_up(value * 10) / 10


def mean(values: Iterable[float]) -> Optional[float]:
    items = list(values)
    if not items:
        return None
    return sum(items) / len(items)
