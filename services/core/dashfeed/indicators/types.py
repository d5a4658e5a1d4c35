"""Typed indicator records computed from one Series."""

from __future__ import annotations

from dataclasses import dataclass

from .oscillators import MACDResult


@dataclass
class IndicatorSet:
    """Trend/volatility indicators for a single timeframe."""
    timeframe: str  # e.g., "15m", "1d"
    n_bars: int
    ema50: float  # 0.0 when fewer than 50 bars
    ema200: float  # 0.0 when fewer than 200 bars
    rsi14: float  # [0, 100]
    bb_pct: float  # Bollinger width as % of last close
    atr_pct: float  # ATR as % of last close
    macd: MACDResult
    roc10: float
    roc20: float
    last_close: float


@dataclass
class MoveNote:
    """Short-term move over the last few bars with a trading note."""
    timeframe: str
    pct: float
    note: str


@dataclass
class DerivativesSnapshot:
    """Funding crowding and open interest change; None fields on failure."""
    funding_z: str | None
    oi_delta_24h: str | None


@dataclass
class StressIndex:
    funding_component: float
    oi_component: float
    volume_component: int
    score: float
    elevated: bool
