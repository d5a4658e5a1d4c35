from __future__ import annotations

import re


INTERVAL_RE = re.compile(r"^(\d+)(m|h|d|w)$")


def interval_to_seconds(interval: str) -> int:
    """Convert intervals like 1m/15m/4h/24h/1d into seconds."""
    m = INTERVAL_RE.match(interval.strip())
    if not m:
        raise ValueError(f"Unsupported interval '{interval}'. Use like 1m,15m,1h,1d,1w.")
    n = int(m.group(1))
    unit = m.group(2)
    if unit == "m":
        return n * 60
    if unit == "h":
        return n * 3600
    if unit == "d":
        return n * 86400
    if unit == "w":
        return n * 7 * 86400
    raise ValueError(f"Unsupported interval unit '{unit}'.")


def interval_to_ms(interval: str) -> int:
    return interval_to_seconds(interval) * 1000


def interval_to_hours(interval: str) -> float:
    """Window length in hours (e.g. "15m" -> 0.25)."""
    return interval_to_seconds(interval) / 3600.0


def utc_midnight_ms(now_ms: int) -> int:
    """Start of the UTC day containing now_ms."""
    return now_ms - (now_ms % (86400 * 1000))
