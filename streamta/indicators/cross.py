"""
Crossover detection between two lines.

Classes:
    CrossType: Direction of a detected cross
    Cross: Golden/death cross detector over two lines or two indicators
"""

import logging
from enum import Enum
from typing import Any, Optional, Tuple

from ..base import BaseIndicator
from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


class CrossType(Enum):
    """Direction of a cross of line A over line B."""
    GOLDEN = 'golden'
    DEATH = 'death'


class Cross(BaseIndicator):
    """
    Cross detector.

    Tracks the spread ``line_a - line_b`` and reports a cross when its sign
    changes between two consecutive updates:

        GOLDEN: previous spread <= 0 and current spread > 0
        DEATH:  previous spread >= 0 and current spread < 0

    ``value`` is the cross detected on the latest update, or None when the
    lines did not cross or fewer than two pairs have been seen.

    Two ways to feed it:

    * Explicit pairs: ``update((a, b))`` or a record carrying ``input_fields``.
    * Indicators: ``Cross(fast=SMA(10), slow=SMA(30))`` passes every data point
      to both indicators and compares their values once both are ready.

    The stats queries run over the last ``period`` spreads.

    Example:
        >>> cross = Cross()
        >>> for pair in [(1, 3), (2, 3), (4, 3)]:
        ...     cross.update(pair)
        >>> cross.value
        <CrossType.GOLDEN: 'golden'>
    """

    required_inputs = ('line_a', 'line_b')
    min_period = 2
    scalar_output = False

    def __init__(self, fast: Optional[BaseIndicator] = None, slow: Optional[BaseIndicator] = None,
                 period: int = 2, input_fields: Tuple[str, str] = ('line_a', 'line_b'), dtype: Any = 'float64'):
        """
        Initialize the cross detector.

        Args:
            fast: Indicator whose value is line A. Requires ``slow``.
            slow: Indicator whose value is line B. Requires ``fast``.
            period (int): Number of recent spreads kept for stats. Must be >= 2.
            input_fields: Record fields read as line A and line B in pair mode.
            dtype: numpy floating dtype for the spread window.

        Raises:
            InvalidParameterError: If only one of fast/slow is given, fast and
                slow are the same instance, either is not a float-valued
                indicator, or input_fields is not a pair of field names.
        """
        super().__init__(period, 'line_a', dtype)

        if (fast is None) != (slow is None):
            raise InvalidParameterError("fast/slow", (fast, slow), "both indicators or neither", self._name)
        if fast is not None:
            if fast is slow:
                raise InvalidParameterError("slow", slow, "an indicator instance other than fast", self._name)
            for parameter_name, indicator in (('fast', fast), ('slow', slow)):
                if not isinstance(indicator, BaseIndicator) or not indicator.scalar_output:
                    raise InvalidParameterError(
                        parameter_name, indicator, "indicator with a single float value", self._name
                    )
        if len(input_fields) != 2:
            raise InvalidParameterError("input_fields", input_fields, "pair of field names", self._name)

        self.required_inputs = tuple(input_fields)
        self.fast = fast
        self.slow = slow
        if fast is not None:
            self._children = [fast, slow]

        self._ready_threshold = 2
        self._pair_count = 0
        self._previous_spread: Optional[float] = None
        self._spread: Optional[float] = None
        self._cross: Optional[CrossType] = None

    def update(self, data_point: Any) -> None:
        """
        Process the next pair (or data point for the wrapped indicators).

        Raises:
            MissingInputError: If a line value is missing in pair mode.
            InvalidDataError: If a line value is not a finite number.
        """
        pair = self._next_pair(data_point)
        self._cross = None

        if pair is not None:
            line_a, line_b = pair
            self._previous_spread = self._spread
            self._spread = float(line_a - line_b)
            self._pair_count += 1

            if self._previous_spread is not None:
                if self._previous_spread <= 0 < self._spread:
                    self._cross = CrossType.GOLDEN
                elif self._previous_spread >= 0 > self._spread:
                    self._cross = CrossType.DEATH

            if self._cross is not None:
                logger.debug(f"{self._name}: {self._cross.value} cross, spread {self._previous_spread} -> {self._spread}")

        self._update_metadata(data_point)
        self._store_output(self._cross)
        if pair is not None:
            self._stats_window.push(self._spread)

    def _next_pair(self, data_point: Any) -> Optional[Tuple[Any, Any]]:
        if self.fast is None:
            line_a, line_b = self._read_inputs(data_point)
            return line_a, line_b

        self.fast.update(data_point)
        self.slow.update(data_point)
        if self.fast.value is None or self.slow.value is None:
            return None
        return self._cast(self.fast.value), self._cast(self.slow.value)

    @property
    def is_ready(self) -> bool:
        """True once two pairs have been compared."""
        return self._pair_count >= self._ready_threshold

    @property
    def value(self) -> Optional[CrossType]:
        return self._cross

    @property
    def spread(self) -> Optional[float]:
        """Latest ``line_a - line_b``."""
        return self._spread

    @property
    def crossed(self) -> bool:
        return self._cross is not None

    @property
    def is_golden(self) -> bool:
        return self._cross is CrossType.GOLDEN

    @property
    def is_death(self) -> bool:
        return self._cross is CrossType.DEATH

    def reset(self) -> None:
        super().reset()
        self._pair_count = 0
        self._previous_spread = None
        self._spread = None
        self._cross = None
