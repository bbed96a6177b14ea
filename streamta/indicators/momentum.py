"""
Momentum technical indicators.

This module implements indicators that measure the speed and strength of price movements.
All indicators use O(1) streaming updates.

Classes:
    RSI: Relative Strength Index with configurable smoothing strategies
    RateOfChange: Percentage change against the price ``period`` samples ago
"""

import logging
from collections import deque
from typing import Any, Deque, Literal, Optional

from ..base import BaseIndicator
from ..exceptions import InvalidParameterError
from .smoothing import EmaSmoothing, SmoothingStrategy, WildersSmoothing

logger = logging.getLogger(__name__)


def _build_smoother(strategy: str, period: int, dtype: Any, indicator_name: str) -> SmoothingStrategy:
    if strategy == 'wilders':
        return WildersSmoothing(period, dtype)
    if strategy == 'ema':
        return EmaSmoothing(period, dtype=dtype)
    raise InvalidParameterError("smoothing_strategy", strategy, "either 'wilders' or 'ema'", indicator_name)


class RSI(BaseIndicator):
    """
    Relative Strength Index (RSI) momentum indicator.

    Measures the speed and change of price movements to identify
    overbought/oversold conditions. Uses configurable smoothing strategies
    for different calculation methods.

    Mathematical Formula:
        RSI = 100 - (100 / (1 + RS))
        where RS = Average Gain / Average Loss

        Gains = max(0, current_price - previous_price)
        Losses = max(0, previous_price - current_price)

    Smoothing Methods:
        - 'wilders': Original Wilder's smoothing (α = 1/N)
        - 'ema': Standard EMA smoothing (α = 2/(N+1))

    The first price only primes the previous price, so the averages are
    seeded on the ``period + 1``-th price. A zero average loss reports 100.

    Example:
        >>> rsi = RSI(period=14, smoothing_strategy='wilders')
        >>> for bar in market_data:
        ...     rsi.update(bar)
        ...     if rsi.is_overbought:
        ...         print(f"Overbought: RSI = {rsi.value:.1f}")
    """

    required_inputs = ('close',)  # Default, overridden by input_field parameter
    min_period = 2

    def __init__(
        self,
        period: int = 14,
        input_field: str = 'close',
        smoothing_strategy: Literal['wilders', 'ema'] = 'wilders',
        oversold: float = 20.0,
        overbought: float = 80.0,
        dtype: Any = 'float64',
    ):
        """
        Initialize Relative Strength Index indicator.

        Args:
            period (int): Number of periods for RSI calculation.
                Standard period is 14. Must be positive integer >= 2.
            input_field (str): Field to use for calculation. Defaults to 'close'.
            smoothing_strategy (str): Smoothing method to use for gain/loss averages.
                'wilders': Original Wilder's smoothing (α = 1/period)
                'ema': Standard EMA smoothing (α = 2/(period+1))
            oversold (float): Level at or below which ``is_oversold`` is True.
            overbought (float): Level at or above which ``is_overbought`` is True.
            dtype: numpy floating dtype for the running averages.

        Raises:
            InvalidParameterError: If period < 2, smoothing_strategy is unknown,
                or the thresholds are not 0 <= oversold < overbought <= 100.
        """
        super().__init__(period, input_field, dtype)

        # Override required_inputs based on input_field parameter
        self.required_inputs = (input_field,)

        # One extra price for the first gain/loss
        self._ready_threshold = self.period + 1

        self._gain_smoother = _build_smoother(smoothing_strategy, self.period, self.dtype, self._name)
        self._loss_smoother = _build_smoother(smoothing_strategy, self.period, self.dtype, self._name)
        self.smoothing_strategy = smoothing_strategy

        if not 0 <= oversold < overbought <= 100:
            raise InvalidParameterError(
                "oversold/overbought", (oversold, overbought), "0 <= oversold < overbought <= 100", self._name
            )
        self.oversold = float(oversold)
        self.overbought = float(overbought)

        self._previous_price: Optional[Any] = None
        self._rsi_value: Optional[float] = None

    def update(self, data_point: Any) -> None:
        """
        Process a new data point and update the RSI value.

        Algorithm:
        1. Calculate gain/loss from price change
        2. Update smoothed averages of gains and losses
        3. Calculate Relative Strength (RS = avg_gain / avg_loss)
        4. Convert to RSI = 100 - (100 / (1 + RS))

        Raises:
            MissingInputError: If required input field is missing.
            InvalidDataError: If input data contains invalid values.
        """
        current_price = self._read_input(data_point)

        if self._previous_price is not None:
            price_change = current_price - self._previous_price
            gain = max(0.0, float(price_change))
            loss = max(0.0, -float(price_change))

            avg_gain = self._gain_smoother.update(gain)
            avg_loss = self._loss_smoother.update(loss)

            if avg_gain is not None and avg_loss is not None:
                if avg_loss == 0:
                    logger.debug(f"{self._name}: average loss is zero, RSI pinned at 100")
                    self._rsi_value = 100.0
                else:
                    rs = avg_gain / avg_loss
                    self._rsi_value = 100.0 - (100.0 / (1.0 + rs))

        self._previous_price = current_price

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        """
        Get the current RSI value.

        Returns:
            Optional[float]: Current RSI value between 0-100, or None during warm-up.
        """
        if not self.is_ready:
            return None
        return self._rsi_value

    @property
    def average_gain(self) -> Optional[float]:
        """Current smoothed average of gains, or None if not ready."""
        return self._gain_smoother.value if self.is_ready else None

    @property
    def average_loss(self) -> Optional[float]:
        """Current smoothed average of losses, or None if not ready."""
        return self._loss_smoother.value if self.is_ready else None

    @property
    def relative_strength(self) -> Optional[float]:
        """
        Get the current Relative Strength (RS) ratio.

        Returns:
            Optional[float]: average_gain / average_loss, ``inf`` when there
                are no losses, or None if not ready.
        """
        if not self.is_ready:
            return None

        avg_loss = self.average_loss
        if avg_loss == 0:
            return float('inf')
        return self.average_gain / avg_loss

    @property
    def is_oversold(self) -> bool:
        return self.is_ready and self._rsi_value <= self.oversold

    @property
    def is_overbought(self) -> bool:
        return self.is_ready and self._rsi_value >= self.overbought

    def reset(self) -> None:
        """
        Reset the indicator to its initial state.

        This includes resetting the smoothing strategies.
        """
        super().reset()
        self._previous_price = None
        self._rsi_value = None
        self._gain_smoother.reset()
        self._loss_smoother.reset()


class RateOfChange(BaseIndicator):
    """
    Rate of Change (ROC) indicator.

    Mathematical Formula:
        ROC = (price - price_n_ago) / price_n_ago * 100

    Keeps the last ``period + 1`` prices, so the first value is available
    once ``period + 1`` prices have been ingested. A zero base price has no
    defined percentage change and reports 0.0.
    """

    required_inputs = ('close',)
    min_period = 2

    def __init__(self, period: int = 12, input_field: str = 'close', dtype: Any = 'float64'):
        super().__init__(period, input_field, dtype)
        self.required_inputs = (input_field,)
        self._ready_threshold = self.period + 1

        self._prices: Deque[Any] = deque(maxlen=self.period + 1)
        self._roc_value: Optional[float] = None

    def update(self, data_point: Any) -> None:
        price = self._read_input(data_point)
        self._prices.append(price)

        if len(self._prices) == self._prices.maxlen:
            base = self._prices[0]
            if base == 0:
                logger.debug(f"{self._name}: base price is zero, reporting 0.0")
                self._roc_value = 0.0
            else:
                self._roc_value = float((price - base) / base) * 100.0

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        if not self.is_ready:
            return None
        return self._roc_value

    def reset(self) -> None:
        super().reset()
        self._prices.clear()
        self._roc_value = None
