"""
Dashboard data endpoints.

GET /data       -> HTML page with the JSON payload in <pre id="dashboard-data">
GET /data.json  -> the JSON payload (CDN-cacheable for a short time)
OPTIONS either  -> CORS preflight
"""

from __future__ import annotations

import html
import json
import logging
import time
from typing import Any, Awaitable, Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from ..blocks.base import BlockContext
from ..blocks.engine import build_dashboard_data
from ..config import Settings, get_settings
from ..providers.http import JsonFetcher, build_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])

PayloadBuilder = Callable[[], Awaitable[dict[str, Any]]]

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

FAILURE_BODY = "Service temporarily unavailable."

# Settings and payload builder (overridable from main.py and tests)
_settings: Settings | None = None
_payload_builder: PayloadBuilder | None = None


def set_settings(settings: Settings) -> None:
    """Set the settings instance."""
    global _settings
    _settings = settings


def get_current_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def set_payload_builder(builder: PayloadBuilder | None) -> None:
    """Replace the payload builder (None restores the live upstream builder)."""
    global _payload_builder
    _payload_builder = builder


async def build_live_payload() -> dict[str, Any]:
    """Fetch every upstream over one aiohttp session and build the payload."""
    settings = get_current_settings()
    async with build_session(settings.http_timeout_seconds) as session:
        ctx = BlockContext.build(settings, JsonFetcher(session), now_ms=int(time.time() * 1000))
        return await build_dashboard_data(ctx)


async def _build_payload() -> dict[str, Any]:
    builder = _payload_builder or build_live_payload
    payload = await builder()
    payload["timestamp"] = int(time.time() * 1000)
    return payload


def render_html(payload_json: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        f'<html><body><pre id="dashboard-data">{html.escape(payload_json, quote=False)}</pre></body></html>'
    )


def _failure_response() -> Response:
    return Response(
        content=FAILURE_BODY,
        status_code=500,
        media_type="text/html; charset=utf-8",
    )


@router.get("/data.json")
async def get_data_json() -> Response:
    """Dashboard payload as JSON."""
    settings = get_current_settings()
    headers = {
        "Access-Control-Allow-Origin": "*",
        "Cache-Control": "public, max-age=0, must-revalidate",
        "CDN-Cache-Control": f"public, s-maxage={settings.cdn_max_age_seconds}, must-revalidate",
    }
    try:
        payload = await _build_payload()
        # Renders compact JSON with allow_nan=False
        return JSONResponse(payload, media_type="application/json; charset=utf-8", headers=headers)
    except Exception:
        logger.exception("Error building dashboard data")
        return _failure_response()


@router.get("/data")
async def get_data_html() -> Response:
    """Dashboard payload embedded in a minimal HTML page."""
    try:
        payload = await _build_payload()
        body = render_html(json.dumps(payload, separators=(",", ":"), allow_nan=False))
    except Exception:
        logger.exception("Error building dashboard data")
        return _failure_response()

    return Response(
        content=body,
        media_type="text/html; charset=utf-8",
        headers={"Access-Control-Allow-Origin": "*"},
    )


@router.options("/data")
@router.options("/data.json")
async def preflight() -> Response:
    """CORS preflight."""
    return Response(status_code=204, headers=CORS_PREFLIGHT_HEADERS)
