"""Bull/bear volume split over trailing wall-clock windows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..providers.base import Bar
from .config import (
    HIGH_RATIO,
    LOW_RATIO,
    RELATIVE_MIN_BASELINE,
    RELATIVE_WINDOWS,
    VERY_HIGH_RATIO,
    VOLUME_BASELINE_WINDOW,
    VOLUME_WINDOWS,
)


@dataclass
class VolumeWindow:
    """Volume traded in one trailing window, split by candle direction."""
    label: str
    hours: float
    bull: float = 0.0
    bear: float = 0.0

    @property
    def total(self) -> float:
        return self.bull + self.bear


def volume_window(bars: Sequence[Bar], now_ms: int, label: str, hours: float) -> VolumeWindow:
    """
    Sum volume of bars opened within `hours` of now_ms.

    A bar is bullish when close >= open, bearish otherwise.
    """
    cutoff = now_ms - hours * 3_600_000
    window = VolumeWindow(label=label, hours=hours)
    for bar in bars:
        if bar.open_time < cutoff:
            continue
        if bar.close >= bar.open:
            window.bull += bar.volume
        else:
            window.bear += bar.volume
    return window


def volume_windows(
    bars: Sequence[Bar],
    now_ms: int,
    windows: dict[str, float] | None = None,
) -> dict[str, VolumeWindow]:
    if windows is None:
        windows = VOLUME_WINDOWS
    return {label: volume_window(bars, now_ms, label, hours) for label, hours in windows.items()}


def classify_relative(ratio: float) -> str:
    """Map a window/baseline volume ratio to a label (strict comparisons)."""
    if ratio > VERY_HIGH_RATIO:
        return "very high"
    if ratio > HIGH_RATIO:
        return "high"
    if ratio < LOW_RATIO:
        return "low"
    return "normal"


def relative_volume(
    windows: dict[str, VolumeWindow],
    labels: list[str] | None = None,
    baseline_label: str = VOLUME_BASELINE_WINDOW,
) -> dict[str, str]:
    """
    Classify shorter windows against their proportional share of the baseline.

    The expected volume for a window is baseline_total * hours / baseline_hours,
    floored at RELATIVE_MIN_BASELINE so near-empty baselines don't blow up.
    """
    if labels is None:
        labels = RELATIVE_WINDOWS

    baseline = windows[baseline_label]
    result = {}
    for label in labels:
        w = windows[label]
        expected = baseline.total * w.hours / baseline.hours
        result[label] = classify_relative(w.total / max(expected, RELATIVE_MIN_BASELINE))
    return result
