"""
Tests for the /data and /data.json endpoints.

Route functions are called directly with a stubbed payload builder.
"""

import json

import pytest

from dashfeed.api import data as data_api
from dashfeed.blocks.engine import build_dashboard_data
from dashfeed.config import Settings
from dashfeed.providers.base import FetchError

from conftest import FakeSource


@pytest.fixture(autouse=True)
def api_settings():
    data_api.set_settings(Settings(coinglass_api_key=None, _env_file=None))
    yield
    data_api.set_payload_builder(None)


def _stub(payload):
    async def builder():
        return dict(payload)
    return builder


@pytest.mark.asyncio
async def test_json_endpoint_headers_and_body():
    data_api.set_payload_builder(_stub({"dataA": {}, "errors": []}))

    response = await data_api.get_data_json()

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["cache-control"] == "public, max-age=0, must-revalidate"
    assert response.headers["cdn-cache-control"] == "public, s-maxage=60, must-revalidate"

    body = json.loads(response.body)
    assert body["dataA"] == {}
    assert body["errors"] == []
    assert isinstance(body["timestamp"], int)


@pytest.mark.asyncio
async def test_html_endpoint_wraps_payload_in_pre():
    data_api.set_payload_builder(_stub({"errors": ["E: <b>oops</b> & more"]}))

    response = await data_api.get_data_html()

    assert response.status_code == 200
    assert response.headers["content-type"] == "text/html; charset=utf-8"
    assert response.headers["access-control-allow-origin"] == "*"

    text = response.body.decode()
    assert text.startswith("<!DOCTYPE html>")
    assert '<pre id="dashboard-data">' in text
    assert "&lt;b&gt;oops&lt;/b&gt; &amp; more" in text
    assert "<b>" not in text


@pytest.mark.asyncio
async def test_total_failure_is_500_without_payload():
    async def boom():
        raise RuntimeError("assembly failed")

    data_api.set_payload_builder(boom)

    for handler in (data_api.get_data_json, data_api.get_data_html):
        response = await handler()
        assert response.status_code == 500
        assert response.body.decode() == "Service temporarily unavailable."
        assert "access-control-allow-origin" not in response.headers


@pytest.mark.asyncio
async def test_nan_in_payload_is_total_failure():
    data_api.set_payload_builder(_stub({"dataA": float("nan")}))
    response = await data_api.get_data_json()
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_preflight():
    response = await data_api.preflight()
    assert response.status_code == 204
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


@pytest.mark.asyncio
async def test_degraded_block_still_returns_200(routes, make_ctx):
    """A failing funding endpoint degrades only block D."""
    routes["/fapi/v1/fundingRate"] = FetchError(500)

    async def builder():
        return await build_dashboard_data(make_ctx(FakeSource(routes), coinglass_api_key="secret"))

    data_api.set_payload_builder(builder)
    response = await data_api.get_data_json()

    assert response.status_code == 200
    body = json.loads(response.body)
    assert body["dataD"] == {"fundingZ": None, "oiDelta24h": None}
    assert [e for e in body["errors"] if e.startswith("D: ")] == ["D: HTTP 500"]
    assert body["errors"] == ["D: HTTP 500"]


def test_routes_registered():
    paths = {(route.path, method) for route in data_api.router.routes for method in route.methods}
    assert ("/data", "GET") in paths
    assert ("/data.json", "GET") in paths
    assert ("/data", "OPTIONS") in paths
    assert ("/data.json", "OPTIONS") in paths


@pytest.mark.asyncio
async def test_non_finite_upstream_value_degrades_one_block(routes, make_ctx):
    routes["/global"]["data"]["total_market_cap"]["usd"] = "NaN"

    async def builder():
        return await build_dashboard_data(make_ctx(FakeSource(routes), coinglass_api_key="secret"))

    data_api.set_payload_builder(builder)
    response = await data_api.get_data_json()

    assert response.status_code == 200
    body = json.loads(response.body)
    assert body["dataF"] is None
    assert body["errors"] == ["F: global missing"]
