"""
Volatility technical indicators.

This module implements indicators that measure market volatility.

Classes:
    Variance: Rolling variance of a price field
    StandardDeviation: Rolling standard deviation of a price field
    TrueRange: Wilder's True Range of a bar
    AverageTrueRange: Wilder-smoothed average of the True Range
"""

import logging
import math
from typing import Any, Optional

from ..base import BaseIndicator, validate_period
from ..window import RollingWindow
from .smoothing import WildersSmoothing

logger = logging.getLogger(__name__)


class Variance(BaseIndicator):
    """
    Rolling variance over the last ``period`` values.

    Mathematical Formula:
        variance = (sum(x^2) - sum(x)^2 / n) / n          (population, default)
        variance = (sum(x^2) - sum(x)^2 / n) / (n - 1)    (sample)

    The window never reports a negative variance, and a window of identical
    values reports exactly 0.
    """

    required_inputs = ('close',)
    _tracks_output_stats = False

    def __init__(self, period: int, input_field: str = 'close', is_sample: bool = False, dtype: Any = 'float64'):
        """
        Args:
            period (int): Window size. Must be >= 1, or >= 2 with ``is_sample``.
            input_field (str): Field to use for calculation. Defaults to 'close'.
            is_sample (bool): Report the sample (n-1) variance instead of the
                population variance.
            dtype: numpy floating dtype for the window.
        """
        super().__init__(period, input_field, dtype)
        self.required_inputs = (input_field,)

        if is_sample:
            validate_period(self.period, minimum=2, indicator_name=self._name)
        self.is_sample = is_sample

        self._window = RollingWindow(self.period, self.dtype)
        self._stats_window = self._window

    def update(self, data_point: Any) -> None:
        value = self._read_input(data_point)
        self._window.push(value)

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        if not self.is_ready:
            return None
        return self._window.variance(self.is_sample)


class StandardDeviation(Variance):
    """Rolling standard deviation, the square root of :class:`Variance`."""

    @property
    def value(self) -> Optional[float]:
        if not self.is_ready:
            return None
        return self._window.std_dev(self.is_sample)


class TrueRange(BaseIndicator):
    """
    True Range (TR) of a bar.

    Mathematical Formula:
        TR = max(high - low, |high - prev_close|, |low - prev_close|)

    The first bar has no previous close, so its TR is ``high - low``. TR is
    available from the first bar; ``period`` sizes the window of recent TRs
    the stats queries run over.
    """

    required_inputs = ('high', 'low', 'close')

    def __init__(self, period: int = 14, dtype: Any = 'float64'):
        super().__init__(period, 'close', dtype)
        self._ready_threshold = 1

        self._previous_close: Optional[Any] = None
        self._tr_value: Optional[float] = None

    def update(self, data_point: Any) -> None:
        """
        Process a bar and update the True Range.

        Args:
            data_point: Record with high/low/close, or a ``(high, low, close)`` tuple.

        Raises:
            MissingInputError: If high, low or close is missing.
            InvalidDataError: If any of them is not a finite number.
        """
        high, low, close = self._read_inputs(data_point)
        self._tr_value = self._true_range(high, low, self._previous_close)
        self._previous_close = close

        self._update_metadata(data_point)
        self._store_output(self.value)

    @staticmethod
    def _true_range(high: Any, low: Any, previous_close: Optional[Any]) -> float:
        price_range = float(high - low)
        if previous_close is None:
            return price_range
        return max(price_range, abs(float(high - previous_close)), abs(float(low - previous_close)))

    @property
    def value(self) -> Optional[float]:
        return self._tr_value

    def reset(self) -> None:
        super().reset()
        self._previous_close = None
        self._tr_value = None


class AverageTrueRange(BaseIndicator):
    """
    Average True Range (ATR) indicator.

    Smooths the True Range with Wilder's recursion (α = 1/N), seeded by the
    average of the first ``period`` TRs.

    Mathematical Formula:
        ATR_first = mean(TR_1 .. TR_N)
        ATR = ATR_prev + (TR - ATR_prev) / N

    Example:
        >>> atr = AverageTrueRange(period=14)
        >>> for bar in market_data:
        ...     atr.update(bar)
        ...     if atr.is_ready:
        ...         stop = bar['close'] - 2 * atr.value
    """

    required_inputs = ('high', 'low', 'close')

    def __init__(self, period: int = 14, dtype: Any = 'float64'):
        super().__init__(period, 'close', dtype)

        self._true_range = TrueRange(self.period, self.dtype)
        self._children = [self._true_range]
        self._smoother = WildersSmoothing(self.period, self.dtype)

    def update(self, data_point: Any) -> None:
        high, low, close = self._read_inputs(data_point)

        self._true_range.update((high, low, close))
        self._smoother.update(self._true_range.value)

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        return self._smoother.value

    @property
    def true_range(self) -> Optional[float]:
        """True Range of the latest bar."""
        return self._true_range.value

    def reset(self) -> None:
        super().reset()
        self._smoother.reset()
