"""Base class for streaming technical indicators."""

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import logging
import math

import numpy as np

from .exceptions import InvalidParameterError, InvalidPeriodError
from .fields import COMPOSITE_FIELDS, PRICE_FIELDS, extract_many, validate_value
from .window import RollingWindow

logger = logging.getLogger(__name__)

IndicatorValue = Union[float, Dict[str, float], Any]


def validate_period(period: Any, name: str = "period", minimum: int = 1,
                    indicator_name: Optional[str] = None) -> int:
    """
    Validate period parameter for indicators.

    Args:
        period (Any): The period value to validate
        name (str): Parameter name for error messages
        minimum (int): Smallest accepted period
        indicator_name (Optional[str]): Indicator reported in the error

    Returns:
        int: Validated period value

    Raises:
        InvalidPeriodError: If period is not an integer >= minimum
    """
    if not isinstance(period, (int, np.integer)) or isinstance(period, bool) or period < minimum:
        raise InvalidPeriodError(period, minimum, name, indicator_name)

    return int(period)


def validate_alpha(alpha: Any, indicator_name: Optional[str] = None) -> float:
    """
    Validate alpha parameter for exponential smoothing.

    Raises:
        InvalidParameterError: If alpha is not a number in (0, 1]
    """
    if isinstance(alpha, bool) or not isinstance(alpha, (int, float)):
        raise InvalidParameterError("alpha", alpha, "numeric value between 0 and 1", indicator_name)

    if not 0 < alpha <= 1:
        raise InvalidParameterError("alpha", alpha, "value between 0 and 1 (exclusive of 0)", indicator_name)

    return float(alpha)


def validate_k_factor(k: Any, indicator_name: Optional[str] = None) -> float:
    """
    Validate k factor parameter for Bollinger Bands and McGinley Dynamic.

    Raises:
        InvalidParameterError: If k is not a positive finite number
    """
    if isinstance(k, bool) or not isinstance(k, (int, float)):
        raise InvalidParameterError("k", k, "positive numeric value", indicator_name)

    if not k > 0 or math.isinf(k):
        raise InvalidParameterError("k", k, "positive finite value (> 0)", indicator_name)

    return float(k)


def validate_input_field(input_field: Any, indicator_name: Optional[str] = None) -> str:
    """
    Validate input field parameter.

    Returns:
        str: Validated input field, lower-cased

    Raises:
        InvalidParameterError: If input field is not a price or composite field
    """
    if not isinstance(input_field, str):
        raise InvalidParameterError("input_field", input_field, "string", indicator_name)

    valid_fields = list(PRICE_FIELDS) + list(COMPOSITE_FIELDS)
    if input_field.lower() not in valid_fields:
        raise InvalidParameterError("input_field", input_field, f"one of {valid_fields}", indicator_name)

    return input_field.lower()


class BaseIndicator(ABC):
    """
    Abstract base for streaming technical indicators.

    Every indicator offers the same small contract:

    * ``update(data_point)`` (alias ``next``) ingests one sample and mutates state.
    * ``value`` reads the latest result, ``None`` until the indicator is warmed up.
    * ``period`` is fixed at construction.
    * ``sum()``, ``mean()``, ``variance()``, ``std_dev()`` report statistics over
      the indicator's window: the input window for indicators that are window
      statistics themselves (SMA, Variance, Bollinger Bands), otherwise the last
      ``period`` values the indicator produced.
    """

    # Class attribute to be overridden by subclasses
    required_inputs: Tuple[str, ...] = ()

    # Smallest period the indicator accepts
    min_period: int = 1

    # Push each ready output into the stats window
    _tracks_output_stats: bool = True

    # Value is a single float (False for dict or enum valued indicators)
    scalar_output: bool = True

    def __init__(self, period: int, input_field: str = 'close', dtype: Any = 'float64'):
        """
        Initialize indicator with period, input field and numeric width.

        Args:
            period (int): Window size, validated against ``min_period``.
            input_field (str): Field read from record-shaped data points.
            dtype: numpy floating dtype for internal storage ('float64',
                'float32', 'float16').

        Raises:
            InvalidParameterError: If period or dtype is invalid.
        """
        self._name = self.__class__.__name__
        self.period = validate_period(period, minimum=self.min_period, indicator_name=self._name)
        self.input_field = input_field
        self.dtype = self._validate_dtype(dtype, self._name)
        self._cast = self.dtype.type

        self._output_history: deque = deque(maxlen=1000)  # Store recent outputs
        self._stats_window = RollingWindow(self.period, self.dtype)

        # State management
        self._ready_threshold = self.period
        self._data_count = 0

        # Composite pattern support
        self._children: List['BaseIndicator'] = []

        self._last_update_time: Optional[Any] = None

        logger.debug(f"Initialized {self._name} with period={self.period}, input_field={input_field}, dtype={self.dtype}")

    @abstractmethod
    def update(self, data_point: Any) -> None:
        """
        Process a new data point and update the indicator state.

        Implementations read their inputs with ``_read_inputs``, update state
        in O(1), then call ``_update_metadata`` and ``_store_output``.

        Args:
            data_point: A number, a mapping, an object with OHLCV attributes,
                or a tuple ordered like ``required_inputs``.

        Raises:
            MissingInputError: If required input fields are missing.
            InvalidDataError: If input data contains invalid values.
        """
        pass

    def next(self, data_point: Any) -> None:
        """Alias of :meth:`update`."""
        self.update(data_point)

    def update_many(self, data_points: Iterable[Any]) -> None:
        """Replay a sequence of data points, e.g. to warm up from history."""
        for data_point in data_points:
            self.update(data_point)

    @property
    @abstractmethod
    def value(self) -> Optional[IndicatorValue]:
        """
        Get the current value of the indicator.

        Returns:
            The current value, or None while the indicator is warming up.
            Multi-line indicators return a dict of named floats.
        """
        pass

    @property
    def is_ready(self) -> bool:
        """True once enough data points have been ingested to produce a value."""
        return self._data_count >= self._ready_threshold

    @property
    def data_count(self) -> int:
        """Number of data points ingested since construction or reset."""
        return self._data_count

    @property
    def warmup_period(self) -> int:
        """Number of data points needed before ``value`` is available."""
        return self._ready_threshold

    @property
    def last_update_time(self) -> Optional[Any]:
        """Timestamp of the latest data point, when the data point carried one."""
        return self._last_update_time

    @property
    def children(self) -> List['BaseIndicator']:
        """
        Get the list of child indicators for composite patterns.

        Returns:
            List[BaseIndicator]: Child indicator instances, empty for leaf indicators.
        """
        return self._children.copy()  # Return copy to prevent external modification

    def get_history(self, n: int = 10) -> List[Optional[IndicatorValue]]:
        """
        Retrieve the last n values from the indicator's history.

        Args:
            n (int): Number of recent values to return. Defaults to 10.

        Returns:
            List: Recent indicator values, oldest to newest. Warm-up steps
                appear as None.
        """
        if n <= 0:
            return []

        history_length = len(self._output_history)
        start_idx = max(0, history_length - n)

        return list(self._output_history)[start_idx:]

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def sum(self) -> Optional[float]:
        """Sum over the indicator's stats window."""
        return self._stats_window.sum()

    def mean(self) -> Optional[float]:
        """Mean over the indicator's stats window."""
        return self._stats_window.mean()

    def variance(self, is_sample: bool = False) -> Optional[float]:
        """Variance over the indicator's stats window (population by default)."""
        return self._stats_window.variance(is_sample)

    def std_dev(self, is_sample: bool = False) -> Optional[float]:
        """Standard deviation over the indicator's stats window."""
        return self._stats_window.std_dev(is_sample)

    def reset(self) -> None:
        """
        Reset the indicator to its initial state.

        Clears all internal buffers and state, including child indicators,
        returning the indicator to its post-construction state.
        """
        self._output_history.clear()
        self._stats_window.reset()
        self._data_count = 0
        self._last_update_time = None

        for child in self._children:
            child.reset()

        logger.debug(f"Reset {self._name} indicator state")

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _read_inputs(self, data_point: Any, fields: Optional[Tuple[str, ...]] = None) -> List[Any]:
        """
        Extract, validate and cast the fields an update needs.

        Args:
            data_point: The incoming data point.
            fields: Field names to read, defaults to ``required_inputs``.

        Returns:
            List of values in ``fields`` order, cast to the indicator dtype.

        Raises:
            MissingInputError: If required input fields are missing.
            InvalidDataError: If input data contains invalid values.
        """
        fields = tuple(fields if fields is not None else self.required_inputs)
        raw = extract_many(data_point, fields, self._name)
        return [self._cast(validate_value(field, value, self._name)) for field, value in zip(fields, raw)]

    def _read_input(self, data_point: Any) -> Any:
        """Read the single ``input_field`` value of a data point."""
        return self._read_inputs(data_point, (self.input_field,))[0]

    def _update_metadata(self, data_point: Any) -> None:
        """
        Update indicator metadata after processing a data point.

        Args:
            data_point: The processed data point.
        """
        was_ready = self.is_ready
        self._data_count += 1

        if isinstance(data_point, Mapping):
            timestamp = data_point.get('timestamp')
        else:
            timestamp = getattr(data_point, 'timestamp', None)
        if timestamp is not None:
            self._last_update_time = timestamp

        if not was_ready and self.is_ready:
            logger.debug(f"{self._name} warmed up after {self._data_count} data points")

    def _store_output(self, output_value: Optional[IndicatorValue]) -> None:
        """
        Store the output value in the history buffer and stats window.

        Args:
            output_value: The calculated indicator value, None while warming up.
        """
        self._output_history.append(output_value)
        if self._tracks_output_stats and isinstance(output_value, float):
            self._stats_window.push(output_value)

    @staticmethod
    def _validate_dtype(dtype: Any, indicator_name: Optional[str] = None) -> np.dtype:
        """Resolve ``dtype`` to a numpy floating dtype."""
        try:
            resolved = np.dtype(dtype)
        except TypeError:
            raise InvalidParameterError("dtype", dtype, "numpy floating dtype", indicator_name) from None
        if resolved.kind != 'f':
            raise InvalidParameterError("dtype", dtype, "numpy floating dtype", indicator_name)
        return resolved

    def __repr__(self) -> str:
        """String representation of the indicator."""
        ready_status = "ready" if self.is_ready else f"warming up ({self._data_count}/{self._ready_threshold})"
        return f"{self._name}(period={self.period}, {ready_status})"

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.__repr__()
