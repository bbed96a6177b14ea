"""
Trend-following technical indicators.

This module implements moving averages and trend lines.
All indicators use O(1) streaming updates.

Classes:
    SMA: Simple Moving Average over a rolling window
    EMA: Exponential Moving Average with SMA seeding during warm-up
    DEMA: Double Exponential Moving Average (2*EMA - EMA of EMA)
    McGinleyDynamic: Speed-adjusting moving average
    LinearRegression: Least-squares line over a rolling window
"""

import logging
import math
from typing import Any, Optional

import numpy as np

from ..base import BaseIndicator, validate_k_factor
from ..exceptions import InsufficientDataError, InvalidParameterError
from ..window import RollingWindow
from .smoothing import EmaSmoothing

logger = logging.getLogger(__name__)


class SMA(BaseIndicator):
    """
    Simple Moving Average (SMA) indicator.

    Calculates the arithmetic mean of prices over a specified period using
    a rolling window with a running sum, so no update rescans the window.

    Mathematical Formula:
        SMA = (P1 + P2 + ... + Pn) / n

    For streaming updates:
        new_SMA = old_SMA + (new_price - oldest_price) / n

    Stats queries (``mean``, ``variance``, ``std_dev``) describe the price
    window itself.

    Example:
        >>> sma = SMA(period=20, input_field='close')
        >>> for bar in market_data:
        ...     sma.update(bar)
        ...     if sma.is_ready:
        ...         print(f"SMA(20): {sma.value:.2f}")
    """

    required_inputs = ('close',)  # Default, overridden by input_field parameter
    _tracks_output_stats = False

    def __init__(self, period: int, input_field: str = 'close', dtype: Any = 'float64'):
        """
        Initialize Simple Moving Average indicator.

        Args:
            period (int): Number of periods for the moving average calculation.
                Must be positive integer >= 1.
            input_field (str): Field to use for calculation. Defaults to 'close'.
            dtype: numpy floating dtype for the window.

        Raises:
            InvalidParameterError: If period is not a positive integer.
        """
        super().__init__(period, input_field, dtype)

        # Override required_inputs based on input_field parameter
        self.required_inputs = (input_field,)

        self._window = RollingWindow(self.period, self.dtype)
        self._stats_window = self._window

    def update(self, data_point: Any) -> None:
        """
        Process a new data point and update the SMA value.

        Args:
            data_point: A number or a record carrying ``input_field``.

        Raises:
            MissingInputError: If required input field is missing.
            InvalidDataError: If input data contains invalid values (NaN, None, inf).
        """
        value = self._read_input(data_point)
        self._window.push(value)

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        """
        Get the current Simple Moving Average value.

        Returns:
            Optional[float]: Current SMA value, or None until the window is full.
        """
        if not self.is_ready:
            return None
        return self._window.mean()


class EMA(BaseIndicator):
    """
    Exponential Moving Average (EMA) indicator.

    Calculates exponentially-weighted moving average that gives more weight
    to recent prices. Uses the SMA of the first ``period`` prices as the seed.

    Mathematical Formula:
        EMA_today = α * Price_today + (1-α) * EMA_yesterday
        where α = 2 / (period + 1) by default, or custom alpha if provided

    Initialization Strategy:
        - During first N data points: buffer prices, no output
        - On the N-th point: EMA = SMA of the buffered prices
        - After N points: exponential recursion

    Example:
        >>> ema = EMA(period=12, input_field='close')
        >>> ema_custom = EMA(period=12, alpha=0.1)
    """

    required_inputs = ('close',)  # Default, overridden by input_field parameter

    def __init__(self, period: int, input_field: str = 'close', alpha: Optional[float] = None,
                 dtype: Any = 'float64'):
        """
        Initialize Exponential Moving Average indicator.

        Args:
            period (int): Number of periods for EMA calculation and SMA seeding.
                Must be positive integer >= 1.
            input_field (str): Field to use for calculation. Defaults to 'close'.
            alpha (Optional[float]): Custom smoothing factor in (0, 1].
                If None, uses standard EMA formula: α = 2/(period+1).
            dtype: numpy floating dtype for the running value.

        Raises:
            InvalidParameterError: If period is not positive or alpha is out of range.
        """
        super().__init__(period, input_field, dtype)

        # Override required_inputs based on input_field parameter
        self.required_inputs = (input_field,)

        try:
            self._smoother = EmaSmoothing(self.period, alpha, self.dtype)
        except InvalidParameterError as e:
            raise InvalidParameterError(e.parameter_name, e.value, e.expected, self._name) from None

    def update(self, data_point: Any) -> None:
        """
        Process a new data point and update the EMA value.

        Args:
            data_point: A number or a record carrying ``input_field``.

        Raises:
            MissingInputError: If required input field is missing.
            InvalidDataError: If input data contains invalid values.
        """
        value = self._read_input(data_point)
        self._smoother.update(value)

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        """
        Get the current Exponential Moving Average value.

        Returns:
            Optional[float]: Current EMA value, or None during the seed phase.
        """
        return self._smoother.value

    @property
    def alpha(self) -> float:
        """
        Get the smoothing factor (alpha) used by this EMA.

        Returns:
            float: The alpha value used in EMA calculation.
        """
        return self._smoother.get_alpha()

    def reset(self) -> None:
        """Reset the indicator, including the smoothing engine."""
        super().reset()
        self._smoother.reset()


class DEMA(BaseIndicator):
    """
    Double Exponential Moving Average (DEMA) indicator.

    Mathematical Formula:
        DEMA = 2 * EMA(n) - EMA(EMA(n))

    The inner EMA warms up after ``period`` points, then feeds its outputs to
    the outer EMA, which needs another ``period - 1`` points. DEMA is ready
    after ``2 * period - 1`` data points.
    """

    required_inputs = ('close',)

    def __init__(self, period: int, input_field: str = 'close', dtype: Any = 'float64'):
        super().__init__(period, input_field, dtype)
        self.required_inputs = (input_field,)
        self._ready_threshold = 2 * self.period - 1

        self.ema = EMA(self.period, dtype=self.dtype)
        self.ema_of_ema = EMA(self.period, dtype=self.dtype)
        self._children = [self.ema, self.ema_of_ema]

        self._dema_value: Optional[float] = None

    def update(self, data_point: Any) -> None:
        value = self._read_input(data_point)

        self.ema.update(value)
        ema_value = self.ema.value
        if ema_value is not None:
            self.ema_of_ema.update(ema_value)
            ema_of_ema_value = self.ema_of_ema.value
            if ema_of_ema_value is not None:
                self._dema_value = 2.0 * ema_value - ema_of_ema_value

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        if not self.is_ready:
            return None
        return self._dema_value

    def reset(self) -> None:
        super().reset()
        self._dema_value = None


class McGinleyDynamic(BaseIndicator):
    """
    McGinley Dynamic (MD) indicator.

    A moving average that speeds up in falling markets and slows down in
    rising ones by scaling its step with the price/MD ratio.

    Mathematical Formula:
        MD = MD_prev + (price - MD_prev) / (k * N * (price / MD_prev)^4)

    The first price seeds MD. If the previous MD is zero, or the step
    degenerates (the denominator is zero or overflows, or the new MD is not
    finite), MD is reseeded with the current price.
    The value is reported once ``period`` data points have been ingested.

    Args:
        period (int): N, the nominal speed of the average.
        k (float): Constant scaling the period. 1.0 gives the plain formula;
            McGinley's suggested value is 0.6.
    """

    required_inputs = ('close',)

    def __init__(self, period: int = 10, k: float = 1.0, input_field: str = 'close', dtype: Any = 'float64'):
        super().__init__(period, input_field, dtype)
        self.required_inputs = (input_field,)

        self._k = validate_k_factor(k, self._name)

        self._md_value: Optional[Any] = None

    def update(self, data_point: Any) -> None:
        price = self._read_input(data_point)

        if self._md_value is None:
            self._md_value = price
        elif self._md_value == 0:
            logger.debug(f"{self._name}: previous value is zero, reseeding with {float(price)}")
            self._md_value = price
        else:
            with np.errstate(all='ignore'):
                ratio = price / self._md_value
                denominator = self._k * self.period * ratio ** 4
                md_value = self._md_value + (price - self._md_value) / denominator
            if denominator == 0 or not (math.isfinite(denominator) and math.isfinite(md_value)):
                logger.debug(f"{self._name}: degenerate step (ratio={float(ratio)}), reseeding with {float(price)}")
                self._md_value = price
            else:
                self._md_value = md_value

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        if not self.is_ready or self._md_value is None:
            return None
        return float(self._md_value)

    @property
    def k(self) -> float:
        return self._k

    def reset(self) -> None:
        super().reset()
        self._md_value = None


class LinearRegression(BaseIndicator):
    """
    Linear Regression (least squares) over a rolling window.

    Fits ``y = intercept + slope * x`` to the last ``period`` values with
    x = 1..N (oldest to newest) and reports the fitted value at x = N.

    Mathematical Formula:
        slope = (N*Σxy - Σx*Σy) / (N*Σx² - (Σx)²)
        intercept = (Σy - slope*Σx) / N

    Σx and Σx² are constants of the period. Σy comes from the rolling window,
    and Σxy slides in O(1): when the window moves, every remaining point's x
    drops by one, so

        Σxy_new = Σxy_old - Σy_old + N * y_new

    Σxy is recomputed exactly once every ``period`` slides.
    """

    required_inputs = ('close',)
    min_period = 2

    def __init__(self, period: int = 14, input_field: str = 'close', dtype: Any = 'float64'):
        super().__init__(period, input_field, dtype)
        self.required_inputs = (input_field,)

        n = self.period
        self._sum_x = n * (n + 1) / 2.0
        self._sum_x_sq = n * (n + 1) * (2 * n + 1) / 6.0

        self._window = RollingWindow(n, self.dtype)
        self._sum_xy = 0.0
        self._slides = 0

        self._slope: Optional[float] = None
        self._intercept: Optional[float] = None

    def update(self, data_point: Any) -> None:
        y = self._read_input(data_point)
        n = self.period

        if self._window.is_ready:
            old_sum_y = self._window.sum()
            self._window.push(y)
            self._sum_xy = self._sum_xy - old_sum_y + n * float(y)
            self._slides += 1
            if self._slides >= n:
                self._sum_xy = math.fsum((i + 1) * v for i, v in enumerate(self._window.values()))
                self._slides = 0
        else:
            self._window.push(y)
            self._sum_xy += len(self._window) * float(y)

        if self._window.is_ready:
            self._fit()

        self._update_metadata(data_point)
        self._store_output(self.value)

    def _fit(self) -> None:
        """Recompute slope and intercept from the running sums."""
        n = self.period
        sum_y = self._window.sum()
        denominator = n * self._sum_x_sq - self._sum_x ** 2

        if denominator == 0:
            logger.debug(f"{self._name}: zero variance in x, using a flat line")
            self._slope = 0.0
            self._intercept = sum_y / n
            return

        self._slope = (n * self._sum_xy - self._sum_x * sum_y) / denominator
        self._intercept = (sum_y - self._slope * self._sum_x) / n

    @property
    def value(self) -> Optional[float]:
        """Fitted value at the newest point of the window."""
        if not self.is_ready:
            return None
        return self._intercept + self._slope * self.period

    @property
    def slope(self) -> Optional[float]:
        return self._slope if self.is_ready else None

    @property
    def intercept(self) -> Optional[float]:
        return self._intercept if self.is_ready else None

    @property
    def r_squared(self) -> Optional[float]:
        """
        Coefficient of determination of the current fit.

        A flat window is fitted perfectly by a flat line, so it reports 1.0.
        """
        if not self.is_ready:
            return None

        values = self._window.values()
        mean_y = self._window.mean()
        sst = math.fsum((y - mean_y) ** 2 for y in values)
        ssr = math.fsum((y - (self._intercept + self._slope * (i + 1))) ** 2 for i, y in enumerate(values))

        if sst == 0:
            return 1.0
        return 1.0 - ssr / sst

    def line_std_dev(self, is_sample: bool = True) -> Optional[float]:
        """Standard deviation of the values the line is fitted to."""
        if not self.is_ready:
            return None
        return self._window.std_dev(is_sample)

    def forecast(self, distance: int = 1) -> float:
        """
        Project the fitted line ``distance`` steps past the newest point.

        Raises:
            InsufficientDataError: If the window is not full yet.
        """
        if not self.is_ready:
            raise InsufficientDataError(self._data_count, self._ready_threshold, self._name)
        return self._intercept + self._slope * (self.period + distance)

    def reset(self) -> None:
        super().reset()
        self._window.reset()
        self._sum_xy = 0.0
        self._slides = 0
        self._slope = None
        self._intercept = None
