"""Thin JSON-over-HTTP helper shared by all providers."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from .base import FetchError


logger = logging.getLogger(__name__)


class JsonSource(Protocol):
    """Anything that can GET a URL and return decoded JSON."""

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        ...


class JsonFetcher:
    """
    GET + decode JSON over a caller-owned aiohttp session.

    No retries: a non-2xx status raises FetchError immediately and the
    caller turns it into a block-level error entry.
    """

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        async with self.session.get(url, params=params, headers=headers) as response:
            if not 200 <= response.status < 300:
                text = await response.text()
                logger.warning(f"Upstream error {response.status} for {url}: {text[:200]}")
                raise FetchError(response.status, url)

            # Some upstreams label JSON as text/plain
            return await response.json(content_type=None)


def build_session(timeout_seconds: float) -> aiohttp.ClientSession:
    """Create a per-request session with a total timeout per call."""
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)
    return aiohttp.ClientSession(timeout=timeout)
