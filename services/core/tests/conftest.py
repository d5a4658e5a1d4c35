"""Shared fixtures: a fake JSON upstream and synthetic kline builders."""

from typing import Any, Callable

import pytest

from dashfeed.blocks.base import BlockContext
from dashfeed.config import Settings
from dashfeed.utils.timeframes import interval_to_ms


# 2026-01-01 12:00:00 UTC
NOW_MS = 1767268800000
KLINE_CAP = 1000


def make_kline_rows(
    count: int,
    step_ms: int,
    end_ms: int = NOW_MS,
    start_ms: int | None = None,
    base: float = 100.0,
) -> list[list[Any]]:
    """
    Binance-shaped kline rows with linearly rising closes.

    Even bars are bullish (open below close), odd bars bearish.
    """
    if start_ms is None:
        last_open = (end_ms // step_ms) * step_ms
        start_ms = last_open - (count - 1) * step_ms
    else:
        count = min(count, (end_ms - start_ms) // step_ms + 1)

    rows = []
    for i in range(count):
        close = base + i
        open_ = close - 0.5 if i % 2 == 0 else close + 0.5
        rows.append([
            start_ms + i * step_ms,
            str(open_),
            str(max(open_, close) + 1),
            str(min(open_, close) - 1),
            str(close),
            str(1.0 + i % 3),
            start_ms + (i + 1) * step_ms - 1,
            "0", 0, "0", "0", "0",
        ])
    return rows


def klines_route(params: dict[str, Any]) -> list[list[Any]]:
    """Mimics /api/v3/klines, including the 1000-row cap per request."""
    return make_kline_rows(
        count=min(int(params["limit"]), KLINE_CAP),
        step_ms=interval_to_ms(params["interval"]),
        end_ms=params.get("endTime", NOW_MS),
        start_ms=params.get("startTime"),
    )


class FakeSource:
    """
    In-memory JsonSource keyed by URL suffix.

    A route value may be plain JSON, a callable taking the query params, or
    an exception instance to raise.
    """

    def __init__(self, routes: dict[str, Any]):
        self.routes = routes
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    async def get_json(self, url, params=None, headers=None):
        self.calls.append((url, params))
        for suffix, response in self.routes.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                if callable(response):
                    return response(params or {})
                return response
        raise AssertionError(f"Unexpected URL {url}")


def default_routes() -> dict[str, Any]:
    return {
        "/api/v3/klines": klines_route,
        "/fapi/v1/fundingRate": [{"fundingRate": str(0.0001 * (i % 5))} for i in range(100)],
        "/fapi/v1/openInterest": {"openInterest": "110.0"},
        "/futures/data/openInterestHist": [{"sumOpenInterest": str(100.0 + i)} for i in range(24)],
        "/coins/bitcoin": {"sentiment_votes_up_percentage": 72.34},
        "/fng/": {"data": [{"value": "55", "value_classification": "Greed"}]},
        "/global": {
            "data": {
                "total_market_cap": {"usd": 3.21e12},
                "market_cap_change_percentage_24h_usd": -1.234,
                "market_cap_percentage": {"btc": 56.789, "eth": 12.346},
            }
        },
        "/api/futures/liquidation/v2/aggregated-history": {
            "data": [{"longLiquidationUsd": 1_000_000.0, "shortLiquidationUsd": 3_000_000.0} for _ in range(24)]
        },
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(coinglass_api_key=None, _env_file=None)


@pytest.fixture
def routes() -> dict[str, Any]:
    return default_routes()


@pytest.fixture
def make_ctx(settings) -> Callable[..., BlockContext]:
    def _make(source, now_ms: int = NOW_MS, **overrides) -> BlockContext:
        s = settings.model_copy(update=overrides) if overrides else settings
        return BlockContext.build(s, source, now_ms=now_ms)
    return _make
