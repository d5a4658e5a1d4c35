"""Unit tests for indicator extraction, move notes, funding and stress scores."""

import pytest

from dashfeed.blocks.technicals import serialize_indicator_set
from dashfeed.indicators.features import (
    classify_move,
    compute_stress,
    extract_indicators,
    funding_zscore,
    oi_delta_pct,
)
from dashfeed.providers.base import Bar


def _linear_bars(n, start=100.0):
    """Unit-slope closes with a constant 2-point range around each close."""
    return [
        Bar(open_time=i * 60_000, open=start + i - 0.5, high=start + i + 1, low=start + i - 1,
            close=start + i, volume=1.0)
        for i in range(n)
    ]


class TestExtractIndicators:
    def test_reference_values_250_bars(self):
        """Closes 100..349: hand-computed EMA lag, RSI, ATR, Bollinger width, ROC."""
        ind = extract_indicators("1h", _linear_bars(250))
        out = serialize_indicator_set(ind)

        assert out["ema50"] == 324.5  # 349 - 49/2
        assert out["ema200"] == 249.5  # 349 - 199/2
        assert out["rsi14"] == 100.0
        assert out["atrPct"] == 0.57  # 2 / 349
        assert out["bbPct"] == 6.61  # 4 * sqrt(399/12) / 349
        assert out["roc10"] == 2.95  # 10 / 339
        assert out["roc20"] == 6.08  # 20 / 329
        assert out["macd"]["line"] == 7.0
        assert out["macd"]["signal"] == 7.0
        assert out["macd"]["hist"] == 0.0

    def test_short_history_uses_zero_sentinels(self):
        ind = extract_indicators("1d", _linear_bars(30))
        assert ind.ema50 == 0.0
        assert ind.ema200 == 0.0
        assert ind.rsi14 == 100.0
        assert ind.n_bars == 30

    def test_empty_series_does_not_raise(self):
        ind = extract_indicators("15m", [])
        assert ind.ema50 == 0.0
        assert ind.rsi14 == 0.0
        assert ind.atr_pct == 0.0
        assert ind.last_close == 1.0


class TestClassifyMove:
    @pytest.mark.parametrize("closes,prefix", [
        ([100, 100.5, 101, 101.5, 102], "strong up-move"),
        ([100, 100.2, 100.4, 100.6, 100.6], "bullish drift"),
        ([100, 99, 98.5, 98.4, 98], "strong down-move"),
        ([100, 99.8, 99.6, 99.5, 99.4], "bearish drift"),
        ([100, 100.1, 99.9, 100.0, 100.2], "range base"),
        ([100, 100.1, 100.3, 100.2, 100.1], "range top"),
    ])
    def test_notes(self, closes, prefix):
        move = classify_move("1h", closes)
        assert move.note.startswith(prefix)

    def test_pct(self):
        assert classify_move("4h", [200, 210]).pct == pytest.approx(5.0)

    def test_too_short_raises(self):
        with pytest.raises(ValueError):
            classify_move("1h", [100])


class TestFundingZScore:
    def test_zero_variance_is_string_zero(self):
        assert funding_zscore([0.0001] * 42) == "0.00"

    def test_only_last_sample_counts(self):
        rates = [5.0] * 100 + [0.0] * 41 + [1.0]
        # mean 1/42, population sd sqrt(41)/42 -> z = sqrt(41)
        assert funding_zscore(rates, sample=42) == "6.40"

    def test_two_decimal_string(self):
        z = funding_zscore([0.0001, 0.0002, 0.0003, 0.0001, 0.0005])
        assert isinstance(z, str)
        assert len(z.split(".")[1]) == 2

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            funding_zscore([])


def test_oi_delta_pct_one_decimal():
    assert oi_delta_pct(110.0, 100.0) == "10.0"
    assert oi_delta_pct(97.0, 100.0) == "-3.0"


class TestComputeStress:
    def test_missing_inputs_are_zero(self):
        stress = compute_stress(None, None, None)
        assert stress.score == 0.0
        assert stress.elevated is False

    def test_components_and_caps(self):
        stress = compute_stress("-4.20", "25.0", "very high")
        assert stress.funding_component == 3.0
        assert stress.oi_component == 3.0
        assert stress.volume_component == 2
        assert stress.score == 8.0
        assert stress.elevated is True

    def test_threshold(self):
        assert compute_stress("1.00", "5.0", "high").elevated is True  # 1 + 1 + 1
        assert compute_stress("1.00", "4.0", "high").elevated is False

    def test_unparseable_values_are_zero(self):
        assert compute_stress("n/a", "", "normal").score == 0.0
