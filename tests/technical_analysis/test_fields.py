"""Tests for record field accessors and input validation."""

import math
from collections import namedtuple

import numpy as np
import pandas as pd
import pytest

from streamta.exceptions import InvalidDataError, MissingInputError
from streamta.fields import Bar, extract, extract_many, hl2, hlc3, ohlc4, validate_value
from streamta.indicators.trend import SMA
from streamta.indicators.volatility import AverageTrueRange

Candle = namedtuple('Candle', 'open high low close volume')


class MethodCandle:
    """Record exposing prices as zero-argument methods."""

    def __init__(self, close):
        self._close = close

    def close(self):
        return self._close


class TestExtract:

    def test_mapping(self):
        assert extract({'close': 3.5}, 'close') == 3.5

    def test_attribute(self):
        assert extract(Candle(1.0, 2.0, 0.5, 1.5, 10.0), 'high') == 2.0

    def test_method(self):
        assert extract(MethodCandle(7.0), 'close') == 7.0

    def test_pandas_row(self):
        row = pd.Series({'close': 4.0, 'volume': 100.0})
        assert extract(row, 'volume') == 100.0

    def test_composites_are_derived(self):
        record = {'open': 1.0, 'high': 4.0, 'low': 2.0, 'close': 3.0}
        assert extract(record, 'hl2') == 3.0
        assert extract(record, 'hlc3') == 3.0
        assert extract(record, 'ohlc4') == 2.5

    def test_record_composite_takes_precedence(self):
        assert extract({'high': 4.0, 'low': 2.0, 'hl2': 10.0}, 'hl2') == 10.0

    def test_missing(self):
        with pytest.raises(MissingInputError):
            extract({'close': 1.0}, 'volume')
        with pytest.raises(MissingInputError):
            extract({'high': 1.0}, 'hl2')

    @pytest.mark.parametrize("field, record, bad_field", [
        ('hl2', {'high': None, 'low': 1.0}, 'high'),
        ('hlc3', {'high': '2', 'low': 1.0, 'close': 1.5}, 'high'),
        ('ohlc4', {'open': 1.0, 'high': 2.0, 'low': float('nan'), 'close': 1.5}, 'low'),
    ])
    def test_invalid_composite_component(self, field, record, bad_field):
        with pytest.raises(InvalidDataError, match=f"'{bad_field}'"):
            extract(record, field)


class TestExtractMany:

    def test_tuple_is_positional(self):
        assert extract_many((3.0, 1.0, 2.0), ('high', 'low', 'close')) == [3.0, 1.0, 2.0]

    def test_short_tuple(self):
        with pytest.raises(MissingInputError) as exc_info:
            extract_many((3.0, 1.0), ('high', 'low', 'close'), 'ATR')
        assert exc_info.value.missing_fields == ['close']
        assert exc_info.value.indicator_name == 'ATR'

    def test_namedtuple_reads_by_name(self):
        candle = Candle(1.0, 2.0, 0.5, 1.5, 10.0)
        assert extract_many(candle, ('close', 'volume')) == [1.5, 10.0]

    def test_scalar_satisfies_one_field(self):
        assert extract_many(5.0, ('close',)) == [5.0]
        assert extract_many(np.float32(5.0), ('close',)) == [5.0]
        with pytest.raises(MissingInputError):
            extract_many(5.0, ('close', 'volume'))

    def test_all_missing_fields_reported(self):
        with pytest.raises(MissingInputError) as exc_info:
            extract_many({'close': 1.0}, ('high', 'low', 'close'))
        assert exc_info.value.missing_fields == ['high', 'low']
        assert exc_info.value.required_fields == ['high', 'low', 'close']


class TestValidateValue:

    @pytest.mark.parametrize("value, reason", [
        (None, "None"),
        (float('nan'), "NaN"),
        (float('inf'), "infinite"),
        ("1.0", "not a real number"),
        (True, "not a real number"),
    ])
    def test_invalid(self, value, reason):
        with pytest.raises(InvalidDataError, match=reason):
            validate_value('close', value, 'SMA')

    def test_valid(self):
        assert validate_value('close', 2, 'SMA') == 2
        assert validate_value('close', np.float64(2.5)) == 2.5


class TestHelpers:

    def test_bar_composites(self):
        bar = Bar(open=1.0, high=4.0, low=2.0, close=3.0, volume=5.0)
        assert bar.hl2() == 3.0
        assert bar.hlc3() == 3.0
        assert bar.ohlc4() == 2.5
        assert hl2(bar) == 3.0
        assert hlc3({'high': 6.0, 'low': 0.0, 'close': 3.0}) == 3.0
        assert ohlc4({'open': 1.0, 'high': 1.0, 'low': 1.0, 'close': 1.0}) == 1.0

    def test_helpers_validate_components(self):
        with pytest.raises(InvalidDataError, match="None"):
            hl2({'high': None, 'low': 1.0})
        with pytest.raises(InvalidDataError, match="not a real number"):
            hlc3({'high': '2', 'low': 1.0, 'close': 1.0})
        with pytest.raises(InvalidDataError, match="infinite"):
            ohlc4({'open': float('inf'), 'high': 1.0, 'low': 1.0, 'close': 1.0})


class TestIndicatorInputs:

    def test_composite_input_field(self):
        sma = SMA(2, input_field='hlc3')
        sma.update(Bar(1.0, 4.0, 2.0, 3.0))
        sma.update({'high': 6.0, 'low': 3.0, 'close': 6.0})
        assert sma.value == 4.0

    def test_atr_accepts_every_record_shape(self):
        shapes = [
            (10.0, 8.0, 9.0),
            {'high': 12.0, 'low': 9.5, 'close': 11.0},
            Candle(7.0, 7.0, 6.0, 6.5, 0.0),
        ]
        atr = AverageTrueRange(3)
        for record in shapes:
            atr.update(record)
        assert atr.value == pytest.approx(10.0 / 3.0)

    @pytest.mark.parametrize("input_field, record", [
        ('hl2', {'high': None, 'low': 1.0}),
        ('hlc3', {'high': '2', 'low': 1.0, 'close': 1.0}),
    ])
    def test_bad_composite_component_rejected_without_mutation(self, input_field, record):
        sma = SMA(3, input_field=input_field)
        with pytest.raises(InvalidDataError, match=r"\[SMA\]"):
            sma.update(record)
        assert sma.data_count == 0

    def test_missing_field_names_indicator(self):
        with pytest.raises(MissingInputError, match=r"\[SMA\]"):
            SMA(3).update({'open': 1.0})

    def test_nan_rejected_without_mutation(self):
        sma = SMA(2)
        sma.update(1.0)
        with pytest.raises(InvalidDataError):
            sma.update({'close': math.nan})
        assert sma.data_count == 1
        sma.update(3.0)
        assert sma.value == 2.0
