"""Market structure levels: floor pivots, session VWAP, N-bar range."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..providers.base import Bar


@dataclass
class PivotLevels:
    pp: float
    r1: float
    r2: float
    s1: float
    s2: float


@dataclass
class VWAPBand:
    vwap: float
    upper: float
    lower: float
    bars: int


@dataclass
class RangeLevels:
    high: float
    low: float
    position_pct: float  # where the last close sits inside [low, high]


def floor_pivots(high: float, low: float, close: float) -> PivotLevels:
    """Classical floor-trader pivots from the prior session's H/L/C."""
    pp = (high + low + close) / 3
    span = high - low
    return PivotLevels(
        pp=pp,
        r1=2 * pp - low,
        r2=pp + span,
        s1=2 * pp - high,
        s2=pp - span,
    )


def session_vwap(bars: Sequence[Bar], band_sigmas: float = 1.0) -> VWAPBand:
    """
    Volume-weighted average typical price with a +/- sigma band.

    Sigma is the volume-weighted standard deviation of typical price around
    the VWAP. Zero total volume falls back to an unweighted average.
    """
    if not bars:
        raise ValueError("no bars for VWAP")

    typical = [(b.high + b.low + b.close) / 3 for b in bars]
    weights = [b.volume for b in bars]
    total_volume = sum(weights)
    if total_volume <= 0:
        weights = [1.0] * len(bars)
        total_volume = float(len(bars))

    vwap = sum(tp * w for tp, w in zip(typical, weights)) / total_volume
    variance = sum(w * (tp - vwap) ** 2 for tp, w in zip(typical, weights)) / total_volume
    sigma = math.sqrt(max(0.0, variance))

    return VWAPBand(
        vwap=vwap,
        upper=vwap + band_sigmas * sigma,
        lower=vwap - band_sigmas * sigma,
        bars=len(bars),
    )


def range_levels(bars: Sequence[Bar], period: int = 20) -> RangeLevels:
    """Highest high / lowest low of the last `period` bars."""
    window = list(bars[-period:])
    if not window:
        raise ValueError("no bars for range")

    high = max(b.high for b in window)
    low = min(b.low for b in window)
    last = window[-1].close
    if high > low:
        position = (last - low) / (high - low) * 100
    else:
        position = 50.0
    return RangeLevels(high=high, low=low, position_pct=position)
