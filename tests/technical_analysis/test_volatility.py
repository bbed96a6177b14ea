"""Tests for volatility indicators: Variance, StandardDeviation, TrueRange, ATR."""

import math

import numpy as np
import pandas as pd
import pytest

from streamta.exceptions import InvalidPeriodError, MissingInputError
from streamta.fields import Bar
from streamta.indicators.volatility import AverageTrueRange, StandardDeviation, TrueRange, Variance


def feed(indicator, values):
    out = []
    for v in values:
        indicator.update(v)
        out.append(indicator.value)
    return out


class TestVariance:

    def test_constant_window_is_zero(self):
        variance = Variance(3)
        std_dev = StandardDeviation(3)
        feed(variance, [2, 2, 2])
        feed(std_dev, [2, 2, 2])

        assert variance.value == 0.0
        assert std_dev.value == 0.0
        assert variance.std_dev() == 0.0

    def test_warmup(self):
        assert feed(Variance(3), [1.0, 2.0, 3.0]) == [None, None, pytest.approx(2.0 / 3.0)]

    def test_matches_pandas(self, closes):
        population = pd.Series(closes).rolling(14).var(ddof=0)
        sample = pd.Series(closes).rolling(14).var(ddof=1)

        pop_values = feed(Variance(14), closes)
        sample_values = feed(Variance(14, is_sample=True), closes)

        for i in range(13, len(closes)):
            assert pop_values[i] == pytest.approx(population[i], rel=1e-8)
            assert sample_values[i] == pytest.approx(sample[i], rel=1e-8)

    def test_standard_deviation_matches_numpy(self, closes):
        std_dev = StandardDeviation(10)
        feed(std_dev, closes)
        assert std_dev.value == pytest.approx(np.std(closes[-10:]), rel=1e-8)

    def test_never_negative(self):
        variance = Variance(5)
        values = feed(variance, [1e9 + 1e-4 * math.cos(i) for i in range(300)])
        assert all(v >= 0.0 for v in values if v is not None)

    def test_period_one(self):
        assert feed(Variance(1), [3.0, 7.0, -1.0]) == [0.0, 0.0, 0.0]

    def test_sample_variance_needs_period_two(self):
        with pytest.raises(InvalidPeriodError):
            Variance(1, is_sample=True)


class TestTrueRange:

    BARS = [(10.0, 8.0, 9.0), (12.0, 9.5, 11.0), (7.0, 6.0, 6.5), (8.0, 6.0, 7.0)]

    def test_values(self):
        values = feed(TrueRange(), self.BARS)
        assert values == [2.0, 3.0, 5.0, 2.0]

    def test_ready_from_first_bar(self):
        tr = TrueRange()
        tr.update({'high': 5.0, 'low': 4.0, 'close': 4.5})
        assert tr.is_ready
        assert tr.value == 1.0

    def test_stats_over_recent_true_ranges(self):
        tr = TrueRange(period=3)
        feed(tr, self.BARS)
        assert tr.mean() == pytest.approx(10.0 / 3.0)
        assert tr.sum() == pytest.approx(10.0)

    def test_missing_field(self):
        with pytest.raises(MissingInputError) as exc_info:
            TrueRange().update({'high': 1.0, 'close': 1.0})
        assert exc_info.value.missing_fields == ['low']


class TestAverageTrueRange:

    def test_wilder_smoothing(self):
        atr = AverageTrueRange(3)
        values = feed(atr, TestTrueRange.BARS)

        assert values[:2] == [None, None]
        assert values[2] == pytest.approx(10.0 / 3.0)
        assert values[3] == pytest.approx(26.0 / 9.0)
        assert atr.true_range == 2.0

    def test_matches_reference(self, ohlcv_frame):
        period = 14
        high, low, close = ohlcv_frame['high'], ohlcv_frame['low'], ohlcv_frame['close']
        previous_close = close.shift(1)
        true_range = pd.concat(
            [high - low, (high - previous_close).abs(), (low - previous_close).abs()], axis=1
        ).max(axis=1)

        expected = true_range.iloc[:period].mean()
        for tr in true_range.iloc[period:]:
            expected = expected + (tr - expected) / period

        atr = AverageTrueRange(period)
        for row in ohlcv_frame.itertuples():
            atr.update(Bar(row.open, row.high, row.low, row.close, row.volume))

        assert atr.value == pytest.approx(expected, rel=1e-10)

    def test_reset(self):
        atr = AverageTrueRange(2)
        feed(atr, TestTrueRange.BARS)
        atr.reset()

        assert atr.value is None
        assert atr.true_range is None
        assert atr.data_count == 0
