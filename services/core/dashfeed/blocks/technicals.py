"""Blocks A and B: per-timeframe trend indicators and short-term move notes."""

from __future__ import annotations

from typing import Any

from ..indicators.features import classify_move, extract_indicators
from ..indicators.types import IndicatorSet, MoveNote
from .base import BlockContext, BlockError, BlockOutcome, guard


async def trend_block(ctx: BlockContext) -> BlockOutcome:
    """
    Block A: EMA/RSI/Bollinger/ATR/MACD/ROC per timeframe.

    Each timeframe is fetched and guarded on its own; a failed timeframe is
    left out of the mapping and reported as "A[<tf>]".
    """
    settings = ctx.settings
    value: dict[str, Any] = {}
    errors: list[BlockError] = []

    for tf in settings.get_trend_timeframes():
        with guard(f"A[{tf}]", errors):
            bars = await ctx.binance.fetch_klines(
                symbol=settings.get_symbol(),
                interval=tf,
                limit=settings.trend_kline_limit,
            )
            value[tf] = serialize_indicator_set(extract_indicators(tf, bars))

    return BlockOutcome(key="dataA", value=value, errors=errors)


async def move_block(ctx: BlockContext) -> BlockOutcome:
    """Block B: percent move over the last few bars per timeframe."""
    settings = ctx.settings
    value: dict[str, Any] = {}
    errors: list[BlockError] = []

    for tf in settings.get_trend_timeframes():
        with guard(f"B[{tf}]", errors):
            bars = await ctx.binance.fetch_klines(
                symbol=settings.get_symbol(),
                interval=tf,
                limit=settings.move_kline_limit,
            )
            value[tf] = serialize_move(classify_move(tf, [b.close for b in bars]))

    return BlockOutcome(key="dataB", value=value, errors=errors)


def serialize_indicator_set(ind: IndicatorSet) -> dict[str, Any]:
    """Serialize IndicatorSet to dict for JSON response."""
    return {
        "ema50": round(ind.ema50, 2),
        "ema200": round(ind.ema200, 2),
        "rsi14": round(ind.rsi14, 1),
        "bbPct": round(ind.bb_pct, 2),
        "atrPct": round(ind.atr_pct, 2),
        "macd": {
            "line": round(ind.macd.line, 4),
            "signal": round(ind.macd.signal, 4),
            "hist": round(ind.macd.hist, 4),
        },
        "roc10": round(ind.roc10, 2),
        "roc20": round(ind.roc20, 2),
    }


def serialize_move(move: MoveNote) -> dict[str, Any]:
    return {"pct": round(move.pct, 2), "note": move.note}
