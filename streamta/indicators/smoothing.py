"""
Smoothing strategy classes for technical indicators.

This module implements the Strategy pattern for the exponential recursions
shared by EMA, DEMA, MACD, RSI and ATR.

Classes:
    SmoothingStrategy: Abstract base class with the seed-then-recurse engine
    WildersSmoothing: Wilder's exponential smoothing (α = 1/N)
    EmaSmoothing: Standard exponential moving average smoothing (α = 2/(N+1))
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import numpy as np

from ..base import validate_alpha, validate_period

logger = logging.getLogger(__name__)


class SmoothingStrategy(ABC):
    """
    Abstract base class for exponential smoothing algorithms.

    The recursion runs in two phases. While fewer than ``period`` values have
    been seen, values are buffered and no output is produced. On the
    ``period``-th value the running value is seeded with the simple average
    of the buffered values, and from then on every value is blended in:

        smoothed = previous + α * (new_value - previous)

    which is algebraically ``α * new_value + (1-α) * previous`` but leaves the
    running value untouched when the input equals it.
    """

    def __init__(self, period: int, dtype: Any = np.float64):
        """
        Initialize the smoothing strategy.

        Args:
            period (int): The smoothing period, also the number of seed values.
            dtype: numpy floating dtype used for the running value.
        """
        self.period = validate_period(period, indicator_name=self.__class__.__name__)
        self._cast = np.dtype(dtype).type
        self._current_value: Optional[Any] = None
        self._seed: List[Any] = []

    @abstractmethod
    def get_alpha(self) -> float:
        """
        Get the smoothing factor (alpha) for this strategy.

        Returns:
            float: The alpha value used for exponential smoothing.
        """
        pass

    def update(self, new_value: float) -> Optional[float]:
        """
        Update the smoothed value with a new data point.

        Args:
            new_value (float): New value to incorporate into smoothed result.

        Returns:
            Optional[float]: The updated smoothed value, or None while the
                seed buffer is still filling.
        """
        new_value = self._cast(new_value)

        if self._current_value is None:
            self._seed.append(new_value)
            if len(self._seed) < self.period:
                return None

            first = self._seed[0]
            if all(x == first for x in self._seed):
                self._current_value = first
            else:
                self._current_value = self._cast(math.fsum(self._seed) / self.period)
            self._seed = []
            logger.debug(f"{self.__class__.__name__}({self.period}) seeded at {float(self._current_value)}")
        else:
            alpha = self.get_alpha()
            self._current_value = self._current_value + alpha * (new_value - self._current_value)

        return float(self._current_value)

    @property
    def value(self) -> Optional[float]:
        """
        Get the current smoothed value.

        Returns:
            Optional[float]: Current smoothed value or None before seeding.
        """
        return None if self._current_value is None else float(self._current_value)

    @property
    def is_ready(self) -> bool:
        """True once the seed average has been taken."""
        return self._current_value is not None

    @property
    def seed_count(self) -> int:
        """Number of values buffered towards the seed."""
        return len(self._seed)

    def reset(self) -> None:
        """Reset the smoothing strategy to initial state."""
        self._current_value = None
        self._seed = []


class WildersSmoothing(SmoothingStrategy):
    """
    Wilder's exponential smoothing implementation.

    Uses α = 1/N as the smoothing factor, which is different from standard EMA.
    This is the original smoothing method used by J. Welles Wilder Jr. in RSI
    and ATR.

    Mathematical Formula:
        α = 1 / period
        smoothed_value = α * new_value + (1-α) * previous_smoothed_value
    """

    def get_alpha(self) -> float:
        """Alpha of 1/period."""
        return 1.0 / self.period


class EmaSmoothing(SmoothingStrategy):
    """
    Standard Exponential Moving Average smoothing implementation.

    Uses α = 2/(N+1) unless a custom alpha is supplied.

    Mathematical Formula:
        α = 2 / (period + 1)
        smoothed_value = α * new_value + (1-α) * previous_smoothed_value
    """

    def __init__(self, period: int, alpha: Optional[float] = None, dtype: Any = np.float64):
        super().__init__(period, dtype)
        if alpha is not None:
            self._alpha = validate_alpha(alpha, "EmaSmoothing")
        else:
            self._alpha = 2.0 / (period + 1)

    def get_alpha(self) -> float:
        return self._alpha
