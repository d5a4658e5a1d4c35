"""CoinGecko client: coin sentiment votes and global market statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import ValidationError

from .base import ShapeError, UpstreamModel
from .http import JsonSource


@dataclass
class GlobalStats:
    total_market_cap_usd: float
    market_cap_change_24h_pct: float
    btc_dominance: float
    eth_dominance: float


class _TotalMarketCap(UpstreamModel):
    usd: float


class _MarketCapPercentage(UpstreamModel):
    btc: float
    eth: float


class _GlobalData(UpstreamModel):
    total_market_cap: _TotalMarketCap
    market_cap_change_percentage_24h_usd: float
    market_cap_percentage: _MarketCapPercentage


class CoinGeckoClient:
    def __init__(self, source: JsonSource, base_url: str = "https://api.coingecko.com/api/v3"):
        self.source = source
        self.base_url = base_url.rstrip("/")

    async def fetch_sentiment_up_pct(self, coin_id: str) -> float:
        """Percentage of community votes that are bullish."""
        data = await self.source.get_json(f"{self.base_url}/coins/{coin_id}")
        if not isinstance(data, dict):
            raise ShapeError("sentiment missing")

        up = data.get("sentiment_votes_up_percentage")
        if up is None:
            # Older payloads nest it under community_data
            up = (data.get("community_data") or {}).get("sentiment_votes_up_percentage")
        if up is None:
            raise ShapeError("sentiment missing")
        try:
            up = float(up)
        except (TypeError, ValueError) as e:
            raise ShapeError("sentiment missing") from e
        if not math.isfinite(up):
            raise ShapeError("sentiment missing")
        return up

    async def fetch_global(self) -> GlobalStats:
        data = await self.source.get_json(f"{self.base_url}/global")
        payload = data.get("data") if isinstance(data, dict) else None
        if not payload:
            raise ShapeError("global missing")

        try:
            gd = _GlobalData.model_validate(payload)
        except ValidationError as e:
            raise ShapeError("global missing") from e

        if not gd.total_market_cap.usd:
            raise ShapeError("global missing")

        return GlobalStats(
            total_market_cap_usd=gd.total_market_cap.usd,
            market_cap_change_24h_pct=gd.market_cap_change_percentage_24h_usd,
            btc_dominance=gd.market_cap_percentage.btc,
            eth_dominance=gd.market_cap_percentage.eth,
        )
