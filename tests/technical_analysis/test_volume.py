"""Tests for On-Balance Volume."""

from collections import namedtuple

import pytest

from streamta.exceptions import InvalidParameterError, MissingInputError
from streamta.indicators.volume import OnBalanceVolume

BARS = [(10.0, 100.0), (11.0, 200.0), (10.5, 50.0), (10.5, 70.0)]


def feed(indicator, values):
    out = []
    for v in values:
        indicator.update(v)
        out.append(indicator.value)
    return out


def test_first_bar_starts_at_zero_by_default():
    assert feed(OnBalanceVolume(), BARS) == [0.0, 200.0, 150.0, 150.0]


def test_first_bar_can_start_at_its_volume():
    obv = OnBalanceVolume(first_value='volume')
    assert feed(obv, BARS) == [100.0, 300.0, 250.0, 250.0]


def test_accepts_records():
    Candle = namedtuple('Candle', 'open high low close volume')
    obv = OnBalanceVolume()
    obv.update({'close': 10.0, 'volume': 500})
    obv.update(Candle(10.0, 11.0, 9.5, 10.5, 300.0))
    assert obv.value == 300.0


def test_stats_over_recent_values():
    obv = OnBalanceVolume(period=2)
    feed(obv, BARS)
    assert obv.mean() == 150.0
    assert obv.variance() == 0.0


def test_missing_volume():
    with pytest.raises(MissingInputError) as exc_info:
        OnBalanceVolume().update({'close': 10.0})
    assert exc_info.value.missing_fields == ['volume']


def test_scalar_is_not_enough():
    with pytest.raises(MissingInputError):
        OnBalanceVolume().update(10.0)


def test_invalid_first_value():
    with pytest.raises(InvalidParameterError):
        OnBalanceVolume(first_value='close')


def test_reset():
    obv = OnBalanceVolume()
    feed(obv, BARS)
    obv.reset()
    assert obv.value is None
    assert feed(obv, BARS[:2]) == [0.0, 200.0]
