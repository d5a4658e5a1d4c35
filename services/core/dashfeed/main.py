from __future__ import annotations

import logging
import time
from typing import Any

import uvicorn
from fastapi import FastAPI

from .api import data as data_api
from .config import get_settings


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

data_api.set_settings(settings)

app = FastAPI(
    title="Dashfeed Market Data API",
    version="0.1.0",
)
app.include_router(data_api.router)


@app.get("/health")
async def health() -> dict[str, Any]:
    return {"ok": True, "ts": int(time.time()), "symbol": settings.get_symbol()}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
