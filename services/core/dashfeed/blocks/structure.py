"""Block H: daily pivots, session VWAP and the 15m 20-bar range."""

from __future__ import annotations

from ..indicators.config import RANGE_PERIOD, VWAP_BAND_SIGMAS
from ..indicators.structure import RangeLevels, floor_pivots, range_levels, session_vwap
from ..providers.base import ShapeError
from ..utils.timeframes import utc_midnight_ms
from .base import BlockContext, BlockError, BlockOutcome, guard


async def structure_block(ctx: BlockContext) -> BlockOutcome:
    """
    Market structure levels.

    All three fetches share one guard: any failure nulls the whole block
    and records a single "H" error.
    """
    settings = ctx.settings
    symbol = settings.get_symbol()
    value = None
    errors: list[BlockError] = []

    with guard("H", errors):
        # Last two daily bars: [-2] is the prior completed session
        daily = await ctx.binance.fetch_klines(symbol, "1d", limit=2)
        if len(daily) < 2:
            raise ShapeError("daily klines missing")
        prior = daily[-2]
        pivots = floor_pivots(prior.high, prior.low, prior.close)

        # Up to 1440 bars late in the day: paged past the per-request cap
        session = await ctx.binance.fetch_klines_range(
            symbol,
            "1m",
            start_time=utc_midnight_ms(ctx.now_ms),
            end_time=ctx.now_ms,
            page_limit=settings.kline_page_limit,
        )
        if not session:
            raise ShapeError("session klines missing")
        vwap = session_vwap(session, band_sigmas=VWAP_BAND_SIGMAS)

        intraday = await ctx.binance.fetch_klines(symbol, "15m", limit=settings.range_kline_limit)
        if not intraday:
            raise ShapeError("15m klines missing")
        rng = range_levels(intraday, period=RANGE_PERIOD)

        value = {
            "pivot": {
                "pp": round(pivots.pp, 2),
                "r1": round(pivots.r1, 2),
                "r2": round(pivots.r2, 2),
                "s1": round(pivots.s1, 2),
                "s2": round(pivots.s2, 2),
            },
            "vwap": {
                "vwap": round(vwap.vwap, 2),
                "upper": round(vwap.upper, 2),
                "lower": round(vwap.lower, 2),
                "bars": vwap.bars,
            },
            "range20": _serialize_range(rng),
        }

    return BlockOutcome(key="dataH", value=value, errors=errors)


def _serialize_range(rng: RangeLevels) -> dict[str, float]:
    return {
        "high": round(rng.high, 2),
        "low": round(rng.low, 2),
        "positionPct": round(rng.position_pct, 1),
    }
