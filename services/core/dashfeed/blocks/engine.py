"""Dashboard engine: runs every block in order and merges the outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .base import BlockContext, BlockError, BlockOutcome
from .derivatives import derivatives_block, stress_block
from .flow import volume_block
from .liquidations import liquidations_block
from .macro import global_block, sentiment_block
from .structure import structure_block
from .technicals import move_block, trend_block


logger = logging.getLogger(__name__)

BLOCK_KEYS = ["dataA", "dataB", "dataC", "dataD", "dataE", "dataF", "dataG", "dataH", "dataI"]


@dataclass
class ResultBuilder:
    """Accumulates block outcomes into the response record."""
    values: dict[str, Any] = field(default_factory=dict)
    errors: list[BlockError] = field(default_factory=list)

    def merge(self, outcome: BlockOutcome) -> ResultBuilder:
        self.values[outcome.key] = outcome.value
        self.errors.extend(outcome.errors)
        return self

    def get(self, key: str) -> Any:
        return self.values.get(key)

    def build(self) -> dict[str, Any]:
        result: dict[str, Any] = {key: self.values.get(key) for key in BLOCK_KEYS}
        result["errors"] = [str(e) for e in self.errors]
        result["errorDetails"] = [e.to_dict() for e in self.errors]
        return result


async def build_dashboard_data(ctx: BlockContext) -> dict[str, Any]:
    """
    Build the full dashboard payload for one request.

    Blocks run sequentially; each one is guarded on its own so a failed
    upstream only degrades its block. The stress index (G) reads the
    already-merged derivatives (D) and volume (C) payloads.

    Args:
        ctx: Request-scoped providers, settings and clock

    Returns:
        Result record without the timestamp (added by the HTTP layer)
    """
    builder = ResultBuilder()

    builder.merge(await trend_block(ctx))
    builder.merge(await move_block(ctx))
    builder.merge(await volume_block(ctx))
    builder.merge(await derivatives_block(ctx))
    builder.merge(await sentiment_block(ctx))
    builder.merge(await global_block(ctx))
    builder.merge(stress_block(builder.get("dataD"), builder.get("dataC")))
    builder.merge(await structure_block(ctx))
    builder.merge(await liquidations_block(ctx))

    if builder.errors:
        logger.info(f"Dashboard built with {len(builder.errors)} degraded block(s)")

    return builder.build()
