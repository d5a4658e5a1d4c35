"""Block I: 24h liquidations from CoinGlass (optional, needs an API key)."""

from __future__ import annotations

from .base import BlockContext, BlockError, BlockOutcome, guard


async def liquidations_block(ctx: BlockContext) -> BlockOutcome:
    value = None
    errors: list[BlockError] = []

    with guard("I", errors):
        totals = await ctx.coinglass.fetch_liquidations(ctx.settings.liquidation_symbol, interval="1h", limit=24)
        combined = totals.long_usd + totals.short_usd
        value = {
            "long24hUsdM": round(totals.long_usd / 1e6, 2),
            "short24hUsdM": round(totals.short_usd / 1e6, 2),
            "longSharePct": round(totals.long_usd / combined * 100, 1) if combined else 50.0,
        }

    return BlockOutcome(key="dataI", value=value, errors=errors)
