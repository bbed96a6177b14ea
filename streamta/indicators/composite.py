"""
Composite technical indicators.

This module implements composite indicators that are built from other indicators.

Classes:
    MACD: Moving Average Convergence Divergence over fast/slow/signal EMAs
    BollingerBands: SMA middle band with standard deviation envelopes
"""

import logging
from typing import Any, Dict, Optional

from ..base import BaseIndicator, validate_k_factor, validate_period
from ..exceptions import InvalidParameterError
from .trend import EMA, SMA

logger = logging.getLogger(__name__)


class MACD(BaseIndicator):
    """
    Moving Average Convergence Divergence (MACD) indicator.

    A trend-following momentum indicator that shows the relationship between two
    exponential moving averages (EMAs) of a security's price.

    Mathematical Formula:
        MACD Line = EMA(fast_period) - EMA(slow_period)
        Signal Line = EMA(MACD Line, signal_period)
        Histogram = MACD Line - Signal Line

    The signal EMA only sees MACD values once both price EMAs are seeded, so
    the indicator is ready after ``slow_period + signal_period - 1`` points.
    ``period`` is the signal period, and the stats queries run over the last
    ``signal_period`` MACD line values.

    Attributes:
        fast_ema (EMA): The fast EMA indicator.
        slow_ema (EMA): The slow EMA indicator.
        signal_ema (EMA): The signal line EMA indicator.
    """

    required_inputs = ('close',)
    scalar_output = False

    def __init__(self, fast_period: int = 12, slow_period: int = 26, signal_period: int = 9,
                 input_field: str = 'close', dtype: Any = 'float64'):
        """
        Initialize MACD indicator.

        Args:
            fast_period (int): The period for the fast EMA.
            slow_period (int): The period for the slow EMA.
            signal_period (int): The period for the signal line EMA.
            input_field (str): The input field to use.
            dtype: numpy floating dtype for the EMAs.

        Raises:
            InvalidParameterError: If a period is not a positive integer or
                fast_period is not less than slow_period.
        """
        fast_period = validate_period(fast_period, "fast_period", indicator_name="MACD")
        slow_period = validate_period(slow_period, "slow_period", indicator_name="MACD")
        signal_period = validate_period(signal_period, "signal_period", indicator_name="MACD")
        if fast_period >= slow_period:
            raise InvalidParameterError(
                "fast_period", fast_period, f"less than slow_period ({slow_period})", "MACD"
            )

        super().__init__(signal_period, input_field, dtype)
        self.required_inputs = (input_field,)
        self._ready_threshold = slow_period + signal_period - 1

        self.fast_period = fast_period
        self.slow_period = slow_period
        self.signal_period = signal_period

        self.fast_ema = EMA(fast_period, dtype=self.dtype)
        self.slow_ema = EMA(slow_period, dtype=self.dtype)
        # Fed with MACD line values, not prices
        self.signal_ema = EMA(signal_period, dtype=self.dtype)
        self._children = [self.fast_ema, self.slow_ema, self.signal_ema]

        self._macd_value: Optional[float] = None
        self._previous_histogram: Optional[float] = None

    def update(self, data_point: Any) -> None:
        """
        Update the MACD with a new data point.

        Raises:
            MissingInputError: If required input field is missing.
            InvalidDataError: If input data contains invalid values.
        """
        value = self._read_input(data_point)

        self.fast_ema.update(value)
        self.slow_ema.update(value)

        if self.fast_ema.is_ready and self.slow_ema.is_ready:
            self._previous_histogram = self.histogram
            self._macd_value = self.fast_ema.value - self.slow_ema.value
            self.signal_ema.update(self._macd_value)

        self._update_metadata(data_point)
        self._store_output(self.value)
        if self.is_ready:
            self._stats_window.push(self._macd_value)

    @property
    def value(self) -> Optional[Dict[str, float]]:
        """
        Get the current MACD values.

        Returns:
            Optional[Dict[str, float]]: 'macd', 'signal' and 'histogram', or
                None until the signal line is seeded.
        """
        if not self.is_ready:
            return None
        return {'macd': self.macd, 'signal': self.signal, 'histogram': self.histogram}

    @property
    def macd(self) -> Optional[float]:
        return self._macd_value if self.is_ready else None

    @property
    def signal(self) -> Optional[float]:
        return self.signal_ema.value if self.is_ready else None

    @property
    def histogram(self) -> Optional[float]:
        if not self.is_ready:
            return None
        return self._macd_value - self.signal_ema.value

    @property
    def is_above(self) -> bool:
        """MACD line above its signal line."""
        return self.is_ready and self.histogram > 0

    @property
    def is_below(self) -> bool:
        """MACD line below its signal line."""
        return self.is_ready and self.histogram < 0

    @property
    def crossed(self) -> bool:
        """MACD line crossed its signal line on the latest update."""
        if self._previous_histogram is None or not self.is_ready:
            return False
        current = self.histogram
        return (self._previous_histogram <= 0 < current) or (self._previous_histogram >= 0 > current)

    def reset(self) -> None:
        super().reset()
        self._macd_value = None
        self._previous_histogram = None


class BollingerBands(BaseIndicator):
    """
    Bollinger Bands (BBands) indicator.

    Comprises a middle band (SMA) and upper/lower bands based on standard deviation.

    Mathematical Formula:
        Middle Band = SMA(period)
        Upper Band = Middle Band + (K * StdDev(period))
        Lower Band = Middle Band - (K * StdDev(period))
        Bandwidth = (Upper Band - Lower Band) / Middle Band

    StdDev is the population standard deviation of the same window the SMA
    averages, and the stats queries run over that window.

    Attributes:
        middle_band (SMA): The middle band (SMA) indicator.
    """

    required_inputs = ('close',)
    scalar_output = False
    _tracks_output_stats = False

    def __init__(self, period: int = 20, k: float = 2.0, input_field: str = 'close', dtype: Any = 'float64'):
        """
        Initialize Bollinger Bands indicator.

        Args:
            period (int): The lookback period for SMA and StdDev.
            k (float): The number of standard deviations for the bands.
            input_field (str): The input field to use.
            dtype: numpy floating dtype for the window.

        Raises:
            InvalidParameterError: If period is invalid or k is not a positive number.
        """
        super().__init__(period, input_field, dtype)
        self.required_inputs = (input_field,)

        self._k = validate_k_factor(k, self._name)

        self.middle_band = SMA(self.period, dtype=self.dtype)
        self._children = [self.middle_band]
        self._stats_window = self.middle_band._stats_window

    def update(self, data_point: Any) -> None:
        """
        Update the Bollinger Bands with a new data point.

        Raises:
            MissingInputError: If required input field is missing.
            InvalidDataError: If input data contains invalid values.
        """
        value = self._read_input(data_point)
        self.middle_band.update(value)

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[Dict[str, float]]:
        """
        Get the current Bollinger Bands values.

        Returns:
            Optional[Dict[str, float]]: 'upper', 'middle', 'lower' and
                'bandwidth', or None until the window is full.
        """
        if not self.is_ready:
            return None

        middle = self.middle_band.value
        std_dev_val = self.middle_band.std_dev()

        upper = middle + self._k * std_dev_val
        lower = middle - self._k * std_dev_val

        bandwidth = (upper - lower) / middle if middle != 0 else 0.0

        return {'upper': upper, 'middle': middle, 'lower': lower, 'bandwidth': bandwidth}

    @property
    def k(self) -> float:
        return self._k
