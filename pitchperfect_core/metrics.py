from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable


def safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def round_half_up(value: float, places: int = 0) -> float:
    # Python's round() is banker's rounding; ratings round .5 upwards.
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_score(value: float) -> int:
    return int(round_half_up(value))


def clamp_score(value: int, low: int = 1, high: int = 5) -> int:
    return max(low, min(high, int(value)))


def mean_rating(values: Iterable[float]) -> float:
    items = [float(v) for v in values]
    return round_half_up(safe_div(sum(items), len(items)), 1)
