"""Base types and error taxonomy for upstream market data providers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class Bar:
    """Unified OHLCV bar representation."""
    open_time: int  # Unix timestamp in milliseconds (start of the bar)
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_kline(cls, kline: list) -> Bar:
        """
        Build a Bar from a Binance kline row.

        Kline format: [open_time, open, high, low, close, volume, close_time, ...]

        Raises ValueError on non-numeric or non-finite prices/volume.
        """
        values = [float(v) for v in kline[1:6]]
        if len(values) < 5 or not all(math.isfinite(v) for v in values):
            raise ValueError(f"non-finite kline values {kline[1:6]!r}")
        return cls(
            open_time=int(kline[0]),
            open=values[0],
            high=values[1],
            low=values[2],
            close=values[3],
            volume=values[4],
        )


class UpstreamModel(BaseModel):
    """Shape check for upstream JSON; NaN/inf floats fail validation."""
    model_config = ConfigDict(allow_inf_nan=False)


class UpstreamError(Exception):
    """Base class for failures talking to an upstream API."""
    code = "upstream"


class FetchError(UpstreamError):
    """Upstream answered with a non-2xx status."""
    code = "fetch"

    def __init__(self, status: int, url: str = ""):
        super().__init__(f"HTTP {status}")
        self.status = status
        self.url = url


class ShapeError(UpstreamError):
    """Upstream JSON is missing an expected field or has the wrong type."""
    code = "shape"


class ConfigError(UpstreamError):
    """A credential required by a provider is not configured."""
    code = "config"
