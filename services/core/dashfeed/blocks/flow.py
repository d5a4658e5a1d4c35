"""Block C: bull/bear volume delta over trailing windows."""

from __future__ import annotations

from typing import Any

from ..indicators.config import VOLUME_BASELINE_WINDOW
from ..indicators.volume import VolumeWindow, relative_volume, volume_windows
from ..utils.timeframes import interval_to_ms
from .base import BlockContext, BlockError, BlockOutcome, guard


async def volume_block(ctx: BlockContext) -> BlockOutcome:
    """
    Split 1m volume into bull/bear buckets for 15m/1h/4h/24h windows.

    The full 24h baseline is fetched (paged past the per-request kline cap).
    Adds a "relative" mapping classifying the shorter windows against the
    24h baseline. On failure the value stays an empty mapping.
    """
    settings = ctx.settings
    value: dict[str, Any] = {}
    errors: list[BlockError] = []

    with guard("C", errors):
        bars = await ctx.binance.fetch_klines_range(
            symbol=settings.get_symbol(),
            interval="1m",
            start_time=ctx.now_ms - interval_to_ms(VOLUME_BASELINE_WINDOW),
            end_time=ctx.now_ms,
            page_limit=settings.kline_page_limit,
        )
        windows = volume_windows(bars, ctx.now_ms)
        relative = relative_volume(windows)

        value = {label: serialize_window(w) for label, w in windows.items()}
        value["relative"] = relative

    return BlockOutcome(key="dataC", value=value, errors=errors)


def serialize_window(window: VolumeWindow) -> dict[str, float]:
    # totalVol is the sum of the serialized parts, so bullVol + bearVol == totalVol
    bull = round(window.bull, 2)
    bear = round(window.bear, 2)
    return {
        "bullVol": bull,
        "bearVol": bear,
        "totalVol": bull + bear,
    }
