"""CoinGlass liquidation history (requires an API key)."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from .base import ConfigError, ShapeError, UpstreamModel
from .http import JsonSource


@dataclass
class LiquidationTotals:
    long_usd: float
    short_usd: float
    points: int


class _LiquidationPoint(UpstreamModel):
    longLiquidationUsd: float
    shortLiquidationUsd: float


class CoinGlassClient:
    """
    Aggregated liquidation history client.

    The API key is sent in the CG-API-KEY header; without it every call
    raises ConfigError before touching the network.
    """

    def __init__(self, source: JsonSource, api_key: str | None, base_url: str = "https://open-api-v3.coinglass.com"):
        self.source = source
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def fetch_liquidations(self, symbol: str, interval: str = "1h", limit: int = 24) -> LiquidationTotals:
        if not self.api_key:
            raise ConfigError("COINGLASS_API_KEY not configured")

        data = await self.source.get_json(
            f"{self.base_url}/api/futures/liquidation/v2/aggregated-history",
            params={"symbol": symbol, "interval": interval, "limit": limit},
            headers={"CG-API-KEY": self.api_key, "accept": "application/json"},
        )
        points = data.get("data") if isinstance(data, dict) else None
        if not isinstance(points, list) or not points:
            raise ShapeError("liquidation data missing")

        try:
            parsed = [_LiquidationPoint.model_validate(p) for p in points[-limit:]]
        except ValidationError as e:
            raise ShapeError("liquidation entry malformed") from e

        return LiquidationTotals(
            long_usd=sum(p.longLiquidationUsd for p in parsed),
            short_usd=sum(p.shortLiquidationUsd for p in parsed),
            points=len(parsed),
        )
