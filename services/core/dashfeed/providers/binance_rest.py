"""Binance REST client for spot klines and USD-M futures positioning data."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..utils.timeframes import interval_to_ms
from .base import Bar, ShapeError, UpstreamModel
from .http import JsonSource


logger = logging.getLogger(__name__)

# Binance spot caps /api/v3/klines at 1000 rows per request
KLINE_PAGE_LIMIT = 1000


class FundingRateEntry(UpstreamModel):
    fundingRate: float


class OpenInterestNow(UpstreamModel):
    openInterest: float


class OpenInterestPoint(UpstreamModel):
    sumOpenInterest: float


class BinanceRESTClient:
    """Fetches klines, funding rates and open interest from Binance REST APIs."""

    def __init__(
        self,
        source: JsonSource,
        spot_url: str = "https://api.binance.com",
        futures_url: str = "https://fapi.binance.com",
    ):
        """
        Initialize Binance REST client.

        Args:
            source: JSON fetcher (one aiohttp session per request)
            spot_url: Spot API base URL
            futures_url: USD-M futures API base URL
        """
        self.source = source
        self.spot_url = spot_url.rstrip("/")
        self.futures_url = futures_url.rstrip("/")

    async def fetch_klines(
        self,
        symbol: str,
        interval: str,
        limit: int,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> list[Bar]:
        """
        Fetch a kline Series, oldest first (single request).

        Args:
            symbol: Trading pair (e.g., "BTCUSDT")
            interval: Timeframe (e.g., "1m", "15m", "1d")
            limit: Max bars (Binance caps at 1000)
            start_time: Optional start timestamp (milliseconds)
            end_time: Optional end timestamp (milliseconds)

        Returns:
            List of Bar objects in ascending open_time order
        """
        params = {
            "symbol": symbol.upper(),
            "interval": interval,
            "limit": limit,
        }
        if start_time is not None:
            params["startTime"] = start_time
        if end_time is not None:
            params["endTime"] = end_time

        data = await self.source.get_json(f"{self.spot_url}/api/v3/klines", params=params)

        if not isinstance(data, list):
            raise ShapeError("klines not array")

        try:
            bars = [Bar.from_kline(kline) for kline in data]
        except (TypeError, ValueError, IndexError) as e:
            raise ShapeError(f"kline shape unexpected: {e}") from e

        logger.debug(f"Fetched {len(bars)} {interval} klines for {symbol}")
        return bars

    async def fetch_klines_range(
        self,
        symbol: str,
        interval: str,
        start_time: int,
        end_time: int,
        page_limit: int = KLINE_PAGE_LIMIT,
    ) -> list[Bar]:
        """
        Fetch every bar opening in [start_time, end_time].

        Requests are paged past the per-request cap: each page starts one
        interval after the last bar of the previous page.
        """
        step_ms = interval_to_ms(interval)
        all_bars: list[Bar] = []
        current_start = start_time

        while current_start <= end_time:
            page = await self.fetch_klines(
                symbol,
                interval,
                limit=page_limit,
                start_time=current_start,
                end_time=end_time,
            )
            if not page:
                break
            if page[-1].open_time < current_start:
                raise ShapeError("klines not advancing")

            all_bars.extend(page)

            # Fewer than a full page: nothing left before end_time
            if len(page) < page_limit:
                break
            current_start = page[-1].open_time + step_ms

        return all_bars

    async def fetch_funding_rates(self, symbol: str, limit: int = 1000) -> list[float]:
        """Historical funding rates, oldest first."""
        data = await self.source.get_json(
            f"{self.futures_url}/fapi/v1/fundingRate",
            params={"symbol": symbol.upper(), "limit": limit},
        )
        if not isinstance(data, list):
            raise ShapeError("fundingRate not array")

        try:
            return [FundingRateEntry.model_validate(d).fundingRate for d in data]
        except ValidationError as e:
            raise ShapeError("fundingRate entry malformed") from e

    async def fetch_open_interest(self, symbol: str) -> float:
        """Current open interest in contracts."""
        data = await self.source.get_json(
            f"{self.futures_url}/fapi/v1/openInterest",
            params={"symbol": symbol.upper()},
        )
        try:
            oi = OpenInterestNow.model_validate(data).openInterest
        except ValidationError as e:
            raise ShapeError("openInterest missing") from e
        if not oi:
            raise ShapeError("openInterest missing")
        return oi

    async def fetch_open_interest_history(
        self,
        symbol: str,
        period: str = "1h",
        limit: int = 24,
    ) -> list[float]:
        """Open interest history (sumOpenInterest), oldest first."""
        data = await self.source.get_json(
            f"{self.futures_url}/futures/data/openInterestHist",
            params={"symbol": symbol.upper(), "period": period, "limit": limit},
        )
        if not isinstance(data, list) or not data:
            raise ShapeError("oiHist shape unexpected")

        try:
            points = [OpenInterestPoint.model_validate(d).sumOpenInterest for d in data]
        except ValidationError as e:
            raise ShapeError("oiHist shape unexpected") from e

        if not points[0]:
            raise ShapeError("oiHist shape unexpected")
        return points
