"""alternative.me Fear & Greed index."""

from __future__ import annotations

from dataclasses import dataclass

from .base import ShapeError
from .http import JsonSource


@dataclass
class FearGreedReading:
    value: str
    classification: str

    def label(self) -> str:
        return f"{self.value} · {self.classification}"


async def fetch_fear_greed(source: JsonSource, base_url: str = "https://api.alternative.me") -> FearGreedReading:
    """Latest index reading: {data: [{value, value_classification}]}."""
    data = await source.get_json(f"{base_url.rstrip('/')}/fng/", params={"limit": 1})
    entries = data.get("data") if isinstance(data, dict) else None
    if not entries or not isinstance(entries, list):
        raise ShapeError("FNG missing")

    first = entries[0]
    if not isinstance(first, dict) or "value" not in first or "value_classification" not in first:
        raise ShapeError("FNG missing")

    return FearGreedReading(value=str(first["value"]), classification=str(first["value_classification"]))
