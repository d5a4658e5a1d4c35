"""Indicator configuration constants."""

from __future__ import annotations

from ..utils.timeframes import interval_to_hours


# Block A: trend indicators per timeframe
EMA_FAST_PERIOD = 50
EMA_SLOW_PERIOD = 200
RSI_PERIOD = 14
ATR_PERIOD = 14
BOLLINGER_PERIOD = 20
BOLLINGER_WIDTH_SIGMAS = 4  # upper - lower = 2 * 2 sigma
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9
ROC_SHORT = 10
ROC_LONG = 20

# Block B: short-term move classification (percent over the last few bars)
STRONG_MOVE_PCT = 1.5
DRIFT_PCT = 0.5

# Block C: trailing volume windows, label -> hours
VOLUME_WINDOWS = {label: interval_to_hours(label) for label in ("15m", "1h", "4h", "24h")}
VOLUME_BASELINE_WINDOW = "24h"
RELATIVE_WINDOWS = ["15m", "1h", "4h"]
RELATIVE_MIN_BASELINE = 1.0  # floor on the proportional 24h share

# Relative volume thresholds (ratio of window volume to its 24h share)
VERY_HIGH_RATIO = 2.0
HIGH_RATIO = 1.2
LOW_RATIO = 0.5

# Block G: stress index
STRESS_FUNDING_CAP = 3.0
STRESS_OI_SCALE = 0.2  # 5% OI change in 24h = 1 point
STRESS_OI_CAP = 3.0
STRESS_VOLUME_WINDOW = "1h"
STRESS_VOLUME_POINTS = {
    "very high": 2,
    "high": 1,
}
STRESS_THRESHOLD = 3.0

# Block H: market structure
RANGE_PERIOD = 20
VWAP_BAND_SIGMAS = 1.0
