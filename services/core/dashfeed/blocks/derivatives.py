"""Blocks D and G: derivatives positioning and the derived stress index."""

from __future__ import annotations

from typing import Any

from ..indicators.config import STRESS_VOLUME_WINDOW
from ..indicators.features import compute_stress, funding_zscore, oi_delta_pct
from ..indicators.types import DerivativesSnapshot, StressIndex
from ..providers.base import ShapeError
from .base import BlockContext, BlockError, BlockOutcome, guard


async def derivatives_block(ctx: BlockContext) -> BlockOutcome:
    """
    Block D: funding-rate z-score and 24h open interest change.

    Three upstream calls (funding history, OI now, OI history) must all
    succeed; any failure yields null fields and a single "D" error.
    """
    settings = ctx.settings
    symbol = settings.get_symbol()
    snapshot = DerivativesSnapshot(funding_z=None, oi_delta_24h=None)
    errors: list[BlockError] = []

    with guard("D", errors):
        rates = await ctx.binance.fetch_funding_rates(symbol, limit=settings.funding_rate_limit)
        if not rates:
            raise ShapeError("fundingRate empty")
        funding_z = funding_zscore(rates, sample=settings.funding_sample)

        oi_now = await ctx.binance.fetch_open_interest(symbol)
        oi_hist = await ctx.binance.fetch_open_interest_history(
            symbol,
            period="1h",
            limit=settings.oi_history_points,
        )

        snapshot = DerivativesSnapshot(
            funding_z=funding_z,
            oi_delta_24h=oi_delta_pct(oi_now, oi_hist[0]),
        )

    return BlockOutcome(key="dataD", value=serialize_snapshot(snapshot), errors=errors)


def stress_block(derivatives: dict[str, Any] | None, volume: dict[str, Any] | None) -> BlockOutcome:
    """
    Block G: stress index from already-computed D and C payloads.

    Never fails: missing or null upstream fields count as zero.
    """
    derivatives = derivatives or {}
    relative = (volume or {}).get("relative") or {}

    stress = compute_stress(
        funding_z=derivatives.get("fundingZ"),
        oi_delta_24h=derivatives.get("oiDelta24h"),
        volume_label=relative.get(STRESS_VOLUME_WINDOW),
    )
    return BlockOutcome(key="dataG", value=serialize_stress(stress))


def serialize_snapshot(snapshot: DerivativesSnapshot) -> dict[str, Any]:
    return {"fundingZ": snapshot.funding_z, "oiDelta24h": snapshot.oi_delta_24h}


def serialize_stress(stress: StressIndex) -> dict[str, Any]:
    return {
        "fundingComponent": round(stress.funding_component, 2),
        "oiComponent": round(stress.oi_component, 2),
        "volumeComponent": stress.volume_component,
        "score": round(stress.score, 2),
        "elevated": stress.elevated,
    }
