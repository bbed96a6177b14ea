"""Tests for trend indicators: SMA, EMA, DEMA, McGinley Dynamic, Linear Regression."""

import logging
import warnings

import numpy as np
import pandas as pd
import pytest

from streamta.exceptions import InsufficientDataError, InvalidParameterError, InvalidPeriodError
from streamta.indicators.trend import DEMA, EMA, SMA, LinearRegression, McGinleyDynamic


def feed(indicator, values):
    """Update with every value and collect the value after each step."""
    out = []
    for v in values:
        indicator.update(v)
        out.append(indicator.value)
    return out


def reference_ema(values, period, alpha=None):
    alpha = alpha if alpha is not None else 2.0 / (period + 1)
    out = [None] * (period - 1)
    ema = sum(values[:period]) / period
    out.append(ema)
    for v in values[period:]:
        ema = ema + alpha * (v - ema)
        out.append(ema)
    return out


class TestSMA:

    def test_simple_sequence(self):
        assert feed(SMA(3), [1, 2, 3, 4, 5]) == [None, None, 2.0, 3.0, 4.0]

    @pytest.mark.parametrize("value", [0.1, -3.7, 1e6, 0.0])
    def test_constant_stream(self, value):
        values = feed(SMA(4), [value] * 10)
        assert values[:3] == [None, None, None]
        assert all(v == value for v in values[3:])

    def test_matches_pandas_rolling_mean(self, closes):
        expected = pd.Series(closes).rolling(20).mean()
        values = feed(SMA(20), closes)

        for i, v in enumerate(values):
            if i < 19:
                assert v is None
            else:
                assert v == pytest.approx(expected[i], abs=1e-9)

    def test_stats_run_over_price_window(self, closes):
        sma = SMA(20)
        feed(sma, closes)
        recent = np.array(closes[-20:])

        assert sma.mean() == pytest.approx(sma.value)
        assert sma.sum() == pytest.approx(recent.sum())
        assert sma.variance() == pytest.approx(recent.var(), rel=1e-9)
        assert sma.std_dev(is_sample=True) == pytest.approx(recent.std(ddof=1), rel=1e-9)

    def test_input_field(self):
        sma = SMA(2, input_field='high')
        sma.update({'high': 10.0, 'close': 1.0})
        sma.update({'high': 12.0, 'close': 1.0})
        assert sma.value == 11.0

    @pytest.mark.parametrize("period", [0, -5, 2.5])
    def test_invalid_period(self, period):
        with pytest.raises(InvalidPeriodError):
            SMA(period)


class TestEMA:

    def test_matches_reference(self, closes):
        values = feed(EMA(10), closes)
        expected = reference_ema(closes, 10)

        for v, e in zip(values, expected):
            if e is None:
                assert v is None
            else:
                assert v == pytest.approx(e, rel=1e-12)

    def test_custom_alpha(self, closes):
        ema = EMA(10, alpha=0.3)
        values = feed(ema, closes)

        assert ema.alpha == 0.3
        assert values[-1] == pytest.approx(reference_ema(closes, 10, alpha=0.3)[-1], rel=1e-12)

    def test_default_alpha(self):
        assert EMA(9).alpha == pytest.approx(0.2)

    def test_constant_stream_converges_exactly(self):
        values = feed(EMA(5), [0.1] * 40)
        assert values[:4] == [None] * 4
        assert all(v == 0.1 for v in values[4:])

    def test_invalid_alpha_names_indicator(self):
        with pytest.raises(InvalidParameterError, match=r"\[EMA\]"):
            EMA(5, alpha=2.0)


class TestDEMA:

    def test_warmup_is_two_periods_minus_one(self, closes):
        values = feed(DEMA(5), closes[:12])
        assert values[:8] == [None] * 8
        assert all(v is not None for v in values[8:])

    def test_matches_reference(self, closes):
        period = 6
        e1 = reference_ema(closes, period)
        ready = [v for v in e1 if v is not None]
        e2 = reference_ema(ready, period)
        expected = 2.0 * ready[-1] - e2[-1]

        dema = DEMA(period)
        feed(dema, closes)
        assert dema.value == pytest.approx(expected, rel=1e-10)
        assert len(dema.children) == 2

    def test_constant_stream(self):
        values = feed(DEMA(3), [42.5] * 10)
        assert all(v == 42.5 for v in values[4:])


class TestMcGinleyDynamic:

    def test_matches_reference(self, closes):
        period = 8
        md = closes[0]
        for price in closes[1:]:
            md = md + (price - md) / (period * (price / md) ** 4)

        indicator = McGinleyDynamic(period)
        values = feed(indicator, closes)

        assert values[:period - 1] == [None] * (period - 1)
        assert values[period - 1] is not None
        assert indicator.value == pytest.approx(md, rel=1e-10)

    def test_k_scales_period(self):
        indicator = McGinleyDynamic(period=4, k=0.6)
        feed(indicator, [10.0, 11.0, 12.0, 13.0])

        md = 10.0
        for price in (11.0, 12.0, 13.0):
            md = md + (price - md) / (0.6 * 4 * (price / md) ** 4)
        assert indicator.value == pytest.approx(md)
        assert indicator.k == 0.6

    def test_zero_previous_value_reseeds(self, caplog):
        indicator = McGinleyDynamic(period=1)
        with caplog.at_level(logging.DEBUG, logger='streamta'):
            indicator.update(0.0)
            assert indicator.value == 0.0
            indicator.update(5.0)

        assert indicator.value == 5.0
        assert "reseeding" in caplog.text

    def test_subnormal_previous_value_reseeds(self, caplog):
        indicator = McGinleyDynamic(period=2)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with caplog.at_level(logging.DEBUG, logger='streamta'):
                indicator.update_many([1e-320, 100.0, 100.0, 100.0, 100.0, 100.0])

        assert indicator.value == 100.0
        assert "degenerate step" in caplog.text

    def test_step_stays_finite_after_collapse(self):
        indicator = McGinleyDynamic(period=2, dtype='float32')
        indicator.update_many([1e-30, 1e30, 1e30])
        assert np.isfinite(indicator.value)
        assert indicator.value == pytest.approx(1e30, rel=1e-6)

    @pytest.mark.parametrize("k", [0, -1.0, float('inf'), "1"])
    def test_invalid_k(self, k):
        with pytest.raises(InvalidParameterError):
            McGinleyDynamic(10, k=k)


class TestLinearRegression:

    def test_matches_polyfit_while_sliding(self, closes):
        period = 10
        x = np.arange(1, period + 1)
        indicator = LinearRegression(period)

        for i, price in enumerate(closes):
            indicator.update(price)
            if i < period - 1:
                assert indicator.value is None
                continue

            slope, intercept = np.polyfit(x, closes[i - period + 1:i + 1], 1)
            assert indicator.slope == pytest.approx(slope, abs=1e-8)
            assert indicator.intercept == pytest.approx(intercept, abs=1e-6)
            assert indicator.value == pytest.approx(intercept + slope * period, abs=1e-6)

    def test_perfect_line(self):
        indicator = LinearRegression(5)
        feed(indicator, [2 * i + 1 for i in range(1, 21)])

        assert indicator.slope == pytest.approx(2.0)
        assert indicator.intercept == pytest.approx(31.0)
        assert indicator.value == pytest.approx(41.0)
        assert indicator.forecast(1) == pytest.approx(43.0)
        assert indicator.r_squared == pytest.approx(1.0)

    def test_flat_window(self):
        indicator = LinearRegression(4)
        feed(indicator, [3.0] * 6)

        assert indicator.slope == pytest.approx(0.0)
        assert indicator.value == pytest.approx(3.0)
        assert indicator.r_squared == 1.0
        assert indicator.line_std_dev() == 0.0

    def test_line_std_dev(self):
        indicator = LinearRegression(4)
        feed(indicator, [1.0, 2.0, 4.0, 8.0])
        assert indicator.line_std_dev() == pytest.approx(np.std([1.0, 2.0, 4.0, 8.0], ddof=1))

    def test_not_ready(self):
        indicator = LinearRegression(5)
        indicator.update(1.0)

        assert indicator.slope is None
        assert indicator.intercept is None
        assert indicator.r_squared is None
        assert indicator.line_std_dev() is None
        with pytest.raises(InsufficientDataError):
            indicator.forecast()

    def test_period_must_be_at_least_two(self):
        with pytest.raises(InvalidPeriodError) as exc_info:
            LinearRegression(1)
        assert exc_info.value.minimum == 2
