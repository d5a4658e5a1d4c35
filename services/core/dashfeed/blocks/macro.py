"""Blocks E and F: crowd sentiment and global market-cap statistics."""

from __future__ import annotations

from ..providers.fear_greed import fetch_fear_greed
from .base import BlockContext, BlockError, BlockOutcome, guard


async def sentiment_block(ctx: BlockContext) -> BlockOutcome:
    """Block E: CoinGecko up-vote share plus the Fear & Greed reading."""
    value = None
    errors: list[BlockError] = []

    with guard("E", errors):
        up = await ctx.coingecko.fetch_sentiment_up_pct(ctx.settings.coin_id)
        reading = await fetch_fear_greed(ctx.source, base_url=ctx.settings.fear_greed_url)
        value = {
            "sentimentUpPct": round(up, 1),
            "fearGreed": reading.label(),
        }

    return BlockOutcome(key="dataE", value=value, errors=errors)


async def global_block(ctx: BlockContext) -> BlockOutcome:
    """Block F: total market cap (trillions USD), 24h change, dominance."""
    value = None
    errors: list[BlockError] = []

    with guard("F", errors):
        stats = await ctx.coingecko.fetch_global()
        value = {
            "totalMcapT": round(stats.total_market_cap_usd / 1e12, 2),
            "mcap24hPct": round(stats.market_cap_change_24h_pct, 2),
            "btcDominance": round(stats.btc_dominance, 2),
            "ethDominance": round(stats.eth_dominance, 2),
        }

    return BlockOutcome(key="dataF", value=value, errors=errors)
