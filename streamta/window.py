"""
Rolling window accumulator.

This module implements the bounded buffer every windowed indicator is built on.

Classes:
    RollingWindow: Last-N values with O(1) sum, mean, variance and standard deviation.
"""

import math
from collections import deque
from typing import Any, Deque, Iterator, List, Optional

import numpy as np

from .exceptions import InvalidPeriodError


class RollingWindow:
    """
    Efficient O(1) amortized rolling window of the last ``period`` values.

    Keeps a running sum plus a shifted sum and sum of squares, where every
    value is stored relative to a reference value ``K`` taken from the window
    itself. Shifting keeps the sum-of-squares formula numerically stable, and
    the sums are recomputed exactly from the window contents once every
    ``period`` evictions so they never drift further than one window's worth
    of rounding.

    Mathematical Formula:
        mean = sum(x) / n
        variance = (sum((x-K)^2) - sum(x-K)^2 / n) / n          (population)
        variance = (sum((x-K)^2) - sum(x-K)^2 / n) / (n - 1)    (sample)

    All queries report ``None`` while the window is empty rather than a
    misleading 0 or NaN. Queries over a partially filled window are answered
    from the values seen so far; ``is_ready`` tells whether the window is full.

    Example:
        >>> window = RollingWindow(3)
        >>> for x in (2.0, 4.0, 6.0, 8.0):
        ...     window.push(x)
        >>> window.mean()
        6.0
    """

    def __init__(self, period: int, dtype: Any = np.float64):
        """
        Initialize the RollingWindow.

        Args:
            period (int): Maximum number of values held. Must be >= 1.
            dtype: numpy floating dtype used to store the values.
        """
        if not isinstance(period, int) or isinstance(period, bool) or period < 1:
            raise InvalidPeriodError(period, 1, indicator_name="RollingWindow")

        self.period = period
        self._cast = np.dtype(dtype).type
        self._values: Deque[Any] = deque(maxlen=period)
        self._reference = self._cast(0.0)
        self._sum = self._cast(0.0)
        self._shifted_sum = self._cast(0.0)
        self._shifted_sum_sq = self._cast(0.0)
        # Length of the run of identical values at the newest end.
        self._run = 0
        self._evictions = 0

    def push(self, value: float) -> Optional[float]:
        """
        Insert a value, evicting the oldest one when the window is full.

        Args:
            value (float): The new data point.

        Returns:
            Optional[float]: The evicted value, or None if nothing was evicted.
        """
        value = self._cast(value)

        if not self._values:
            self._reference = value

        evicted = None
        if len(self._values) == self.period:
            evicted = self._values[0]
            shifted = evicted - self._reference
            self._sum -= evicted
            self._shifted_sum -= shifted
            self._shifted_sum_sq -= shifted * shifted
            self._evictions += 1

        if self._values and value == self._values[-1]:
            self._run += 1
        else:
            self._run = 1

        self._values.append(value)
        shifted = value - self._reference
        self._sum += value
        self._shifted_sum += shifted
        self._shifted_sum_sq += shifted * shifted

        if self._evictions >= self.period:
            self._resync()

        return None if evicted is None else float(evicted)

    def _resync(self) -> None:
        """Recompute the running sums exactly from the window contents."""
        self._reference = self._values[0]
        shifted = [x - self._reference for x in self._values]
        self._sum = self._cast(math.fsum(self._values))
        self._shifted_sum = self._cast(math.fsum(shifted))
        self._shifted_sum_sq = self._cast(math.fsum(d * d for d in shifted))
        self._evictions = 0

    @property
    def is_ready(self) -> bool:
        """True once the window holds ``period`` values."""
        return len(self._values) == self.period

    def sum(self) -> Optional[float]:
        """Sum of the values in the window, None if empty."""
        if not self._values:
            return None
        return float(self._sum)

    def mean(self) -> Optional[float]:
        """Arithmetic mean of the window, None if empty."""
        if not self._values:
            return None
        if self._run >= len(self._values):
            return float(self._values[-1])
        return float(self._sum) / len(self._values)

    def variance(self, is_sample: bool = False) -> Optional[float]:
        """
        Variance of the window.

        Args:
            is_sample (bool): Divide by n-1 instead of n. Defaults to the
                population variance.

        Returns:
            Optional[float]: The variance, never negative. None if the window
                is empty, or holds a single value and ``is_sample`` is set.
        """
        n = len(self._values)
        if n == 0 or (is_sample and n < 2):
            return None

        if self._run >= n:
            return 0.0

        squares = float(self._shifted_sum_sq) - float(self._shifted_sum) ** 2 / n
        denominator = n - 1 if is_sample else n
        return max(0.0, squares / denominator)

    def std_dev(self, is_sample: bool = False) -> Optional[float]:
        """Standard deviation of the window, None when variance is None."""
        variance = self.variance(is_sample)
        if variance is None:
            return None
        return math.sqrt(variance)

    @property
    def oldest(self) -> Optional[float]:
        """Oldest value, the next one to be evicted."""
        return float(self._values[0]) if self._values else None

    @property
    def newest(self) -> Optional[float]:
        """Most recently pushed value."""
        return float(self._values[-1]) if self._values else None

    def values(self) -> List[float]:
        """Window contents ordered oldest to newest."""
        return [float(x) for x in self._values]

    def reset(self) -> None:
        """Reset the window to its initial state."""
        self._values.clear()
        self._reference = self._cast(0.0)
        self._sum = self._cast(0.0)
        self._shifted_sum = self._cast(0.0)
        self._shifted_sum_sq = self._cast(0.0)
        self._run = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values())

    def __repr__(self) -> str:
        return f"RollingWindow(period={self.period}, size={len(self._values)})"
