"""Shared types for dashboard blocks: outcomes, structured errors, guard."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

import aiohttp

from ..config import Settings
from ..providers.base import UpstreamError
from ..providers.binance_rest import BinanceRESTClient
from ..providers.coingecko import CoinGeckoClient
from ..providers.coinglass import CoinGlassClient
from ..providers.http import JsonSource


logger = logging.getLogger(__name__)


@dataclass
class BlockError:
    """Why one block (or one timeframe of a block) degraded."""
    block: str  # e.g., "A[15m]", "D"
    code: str  # fetch | shape | config | network | internal
    message: str

    def __str__(self) -> str:
        return f"{self.block}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"block": self.block, "code": self.code, "message": self.message}


@dataclass
class BlockOutcome:
    """Result of one block: its payload (or placeholder) plus any errors."""
    key: str  # e.g., "dataA"
    value: Any
    errors: list[BlockError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class BlockContext:
    """Everything a block needs for one request."""
    settings: Settings
    source: JsonSource
    now_ms: int
    binance: BinanceRESTClient
    coingecko: CoinGeckoClient
    coinglass: CoinGlassClient

    @classmethod
    def build(cls, settings: Settings, source: JsonSource, now_ms: int) -> BlockContext:
        return cls(
            settings=settings,
            source=source,
            now_ms=now_ms,
            binance=BinanceRESTClient(
                source,
                spot_url=settings.binance_spot_url,
                futures_url=settings.binance_futures_url,
            ),
            coingecko=CoinGeckoClient(source, base_url=settings.coingecko_url),
            coinglass=CoinGlassClient(
                source,
                api_key=settings.coinglass_api_key,
                base_url=settings.coinglass_url,
            ),
        )


def classify_exception(exc: Exception) -> tuple[str, str]:
    """Map an exception to (reason code, message)."""
    if isinstance(exc, UpstreamError):
        return exc.code, str(exc)
    if isinstance(exc, asyncio.TimeoutError):
        return "network", "timeout"
    if isinstance(exc, aiohttp.ClientError):
        return "network", str(exc) or exc.__class__.__name__
    return "internal", str(exc) or exc.__class__.__name__


@contextmanager
def guard(block: str, errors: list[BlockError]) -> Iterator[None]:
    """
    Convert any exception raised inside the body into a BlockError.

    The exception is logged and swallowed; siblings keep running.
    """
    try:
        yield
    except Exception as e:
        code, message = classify_exception(e)
        logger.warning(f"Block {block} degraded ({code}): {message}")
        errors.append(BlockError(block=block, code=code, message=message))
