"""Tests for the FastAPI app wiring."""

import pytest

from dashfeed.main import app, health


@pytest.mark.asyncio
async def test_health():
    result = await health()
    assert result["ok"] is True
    assert isinstance(result["ts"], int)
    assert result["symbol"] == "BTCUSDT"


def test_app_mounts_dashboard_routes():
    paths = {route.path for route in app.routes}
    assert {"/data", "/data.json", "/health"} <= paths
