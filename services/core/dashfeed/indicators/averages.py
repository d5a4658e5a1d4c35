"""Moving averages and dispersion over plain float sequences."""

from __future__ import annotations

import math
from typing import Sequence


def sma(values: Sequence[float], period: int) -> float:
    """
    Simple moving average of the last `period` values.

    With fewer than `period` values the mean of everything available is
    returned; an empty sequence yields 0.0.
    """
    window = list(values[-period:]) if period > 0 else []
    if not window:
        return 0.0
    return sum(window) / len(window)


def ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    EMA at every index from period-1 onward.

    Seeded with the SMA of the first `period` values, then
    e = x*k + e*(1-k) with k = 2/(period+1). Element j corresponds to
    values[period - 1 + j]. Empty when the input is shorter than `period`.
    """
    if period <= 0 or len(values) < period:
        return []

    k = 2 / (period + 1)
    e = sum(values[:period]) / period
    out = [e]
    for x in values[period:]:
        e = x * k + e * (1 - k)
        out.append(e)
    return out


def ema(values: Sequence[float], period: int) -> float:
    """Latest EMA value; 0.0 sentinel when the input is shorter than `period`."""
    series = ema_series(values, period)
    return series[-1] if series else 0.0


def stdev(values: Sequence[float], period: int) -> float:
    """Population standard deviation of the trailing `period` values."""
    window = list(values[-period:]) if period > 0 else []
    if not window:
        return 0.0
    mean = sum(window) / len(window)
    return math.sqrt(sum((x - mean) ** 2 for x in window) / len(window))
