"""Oscillators and momentum indicators (RSI, ATR, MACD, ROC, Bollinger width)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .averages import ema, ema_series, sma, stdev
from .config import BOLLINGER_PERIOD, BOLLINGER_WIDTH_SIGMAS, MACD_FAST, MACD_SIGNAL, MACD_SLOW


@dataclass
class MACDResult:
    line: float
    signal: float
    hist: float


def rsi(values: Sequence[float], period: int = 14) -> float:
    """
    Relative Strength Index with Wilder smoothing.

    The first `period` deltas seed average gain/loss; the remainder are
    smoothed with weight 1/period. Returns 0.0 when there are fewer than
    period + 1 values and 100.0 when the average loss is exactly zero.
    """
    if len(values) < period + 1:
        return 0.0

    gain = 0.0
    loss = 0.0
    for i in range(1, period + 1):
        d = values[i] - values[i - 1]
        if d >= 0:
            gain += d
        else:
            loss -= d

    avg_gain = gain / period
    avg_loss = loss / period
    for i in range(period + 1, len(values)):
        d = values[i] - values[i - 1]
        avg_gain = (avg_gain * (period - 1) + max(d, 0.0)) / period
        avg_loss = (avg_loss * (period - 1) + max(-d, 0.0)) / period

    if not avg_loss:
        return 100.0
    return 100 - 100 / (1 + avg_gain / avg_loss)


def true_ranges(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float]) -> list[float]:
    """True range for every bar after the first."""
    return [
        max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )
        for i in range(1, len(highs))
    ]


def atr(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float], period: int = 14) -> float:
    """Average True Range: SMA of the last `period` true ranges (0.0 if too short)."""
    if len(highs) < period + 1:
        return 0.0
    return sma(true_ranges(highs, lows, closes), period)


def macd(
    values: Sequence[float],
    fast: int = MACD_FAST,
    slow: int = MACD_SLOW,
    signal: int = MACD_SIGNAL,
) -> MACDResult:
    """
    MACD line, signal and histogram at the latest bar.

    The line at index i is ema(values[:i+1], fast) - ema(values[:i+1], slow)
    for every i >= slow-1. Both EMAs are carried incrementally in one pass;
    the recurrence and its operation order are the same as recomputing each
    prefix, so the values agree exactly with the per-prefix definition.
    """
    fast_ema = ema_series(values, fast)
    slow_ema = ema_series(values, slow)
    if not slow_ema or not fast_ema:
        return MACDResult(line=0.0, signal=0.0, hist=0.0)

    # fast_ema[j] is at index fast-1+j, slow_ema[j] at slow-1+j
    offset = slow - fast
    line = [fast_ema[j + offset] - slow_ema[j] for j in range(len(slow_ema))]

    latest = line[-1]
    signal_value = ema(line, signal)
    return MACDResult(line=latest, signal=signal_value, hist=latest - signal_value)


def roc(values: Sequence[float], n: int) -> float:
    """Percent change over the last n bars; 0.0 with insufficient history."""
    if n <= 0 or len(values) < n + 1:
        return 0.0
    ref = values[-1 - n]
    if not ref:
        return 0.0
    return (values[-1] - ref) / ref * 100


def bb_width_pct(closes: Sequence[float], period: int = BOLLINGER_PERIOD) -> float:
    """Bollinger band width (4 sigma) as a percentage of the last close."""
    last = closes[-1] if closes and closes[-1] else 1.0
    return BOLLINGER_WIDTH_SIGMAS * stdev(closes, period) / last * 100
