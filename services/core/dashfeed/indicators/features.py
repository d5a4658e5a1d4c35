"""Indicator extraction from OHLCV bars."""

from __future__ import annotations

import math
from typing import Sequence

from ..providers.base import Bar
from .averages import ema
from .config import (
    ATR_PERIOD,
    DRIFT_PCT,
    EMA_FAST_PERIOD,
    EMA_SLOW_PERIOD,
    ROC_LONG,
    ROC_SHORT,
    RSI_PERIOD,
    STRESS_FUNDING_CAP,
    STRESS_OI_CAP,
    STRESS_OI_SCALE,
    STRESS_THRESHOLD,
    STRESS_VOLUME_POINTS,
    STRONG_MOVE_PCT,
)
from .oscillators import atr, bb_width_pct, macd, roc, rsi
from .types import IndicatorSet, MoveNote, StressIndex


def extract_indicators(timeframe: str, bars: Sequence[Bar]) -> IndicatorSet:
    """
    Compute the trend indicator set for one timeframe.

    Args:
        timeframe: Timeframe identifier (e.g., "15m", "1h")
        bars: Series of bars (oldest first, newest last)

    Returns:
        IndicatorSet with unrounded values
    """
    closes = [b.close for b in bars]
    highs = [b.high for b in bars]
    lows = [b.low for b in bars]

    # Percent-of-price fields divide by 1 on an empty/zero close
    last = closes[-1] if closes and closes[-1] else 1.0

    return IndicatorSet(
        timeframe=timeframe,
        n_bars=len(bars),
        ema50=ema(closes, EMA_FAST_PERIOD),
        ema200=ema(closes, EMA_SLOW_PERIOD),
        rsi14=rsi(closes, RSI_PERIOD),
        bb_pct=bb_width_pct(closes),
        atr_pct=atr(highs, lows, closes, ATR_PERIOD) / last * 100,
        macd=macd(closes),
        roc10=roc(closes, ROC_SHORT),
        roc20=roc(closes, ROC_LONG),
        last_close=last,
    )


def classify_move(timeframe: str, closes: Sequence[float]) -> MoveNote:
    """
    Percent move from the first to the last close with a bias note.

    Inside the +/- DRIFT_PCT band the note reads the last bar's direction
    as a possible reversal off the range edge.
    """
    if len(closes) < 2:
        raise ValueError(f"need at least 2 closes, got {len(closes)}")
    if not closes[0]:
        raise ValueError("first close is zero")

    pct = (closes[-1] - closes[0]) / closes[0] * 100

    if pct >= STRONG_MOVE_PCT:
        note = "strong up-move – breakout long / exit shorts"
    elif pct >= DRIFT_PCT:
        note = "bullish drift – long bias"
    elif pct <= -STRONG_MOVE_PCT:
        note = "strong down-move – breakout short / exit longs"
    elif pct <= -DRIFT_PCT:
        note = "bearish drift – short bias"
    elif closes[-1] > closes[-2]:
        note = "range base – possible long reversal"
    else:
        note = "range top – possible short reversal"

    return MoveNote(timeframe=timeframe, pct=pct, note=note)


def funding_zscore(rates: Sequence[float], sample: int = 42) -> str:
    """
    Z-score of the latest funding rate against the trailing sample.

    Uses population standard deviation. Formatted to 2 dp; "0.00" when the
    sample has zero variance.
    """
    window = list(rates[-sample:])
    if not window:
        raise ValueError("no funding rates")

    mean = sum(window) / len(window)
    sd = math.sqrt(sum((x - mean) ** 2 for x in window) / len(window))
    if not sd:
        return "0.00"
    return f"{(window[-1] - mean) / sd:.2f}"


def oi_delta_pct(current: float, oldest: float) -> str:
    """Percent change of open interest vs the oldest history point, 1 dp."""
    return f"{(current - oldest) / oldest * 100:.1f}"


def _to_float(value: str | float | None) -> float:
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(result) else result


def compute_stress(
    funding_z: str | float | None,
    oi_delta_24h: str | float | None,
    volume_label: str | None,
) -> StressIndex:
    """
    Combine positioning and activity into one stress score.

    Missing inputs count as zero so an upstream block failure never
    propagates here.
    """
    funding_component = min(abs(_to_float(funding_z)), STRESS_FUNDING_CAP)
    oi_component = min(abs(_to_float(oi_delta_24h)) * STRESS_OI_SCALE, STRESS_OI_CAP)
    volume_component = STRESS_VOLUME_POINTS.get(volume_label or "", 0)

    score = funding_component + oi_component + volume_component
    return StressIndex(
        funding_component=funding_component,
        oi_component=oi_component,
        volume_component=volume_component,
        score=score,
        elevated=score >= STRESS_THRESHOLD,
    )
