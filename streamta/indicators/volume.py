"""
Volume technical indicators.

Classes:
    OnBalanceVolume: Cumulative volume signed by the close-to-close direction
"""

import logging
from typing import Any, Literal, Optional

from ..base import BaseIndicator
from ..exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


class OnBalanceVolume(BaseIndicator):
    """
    On-Balance Volume (OBV) indicator.

    Mathematical Formula:
        close > prev_close:  OBV = OBV_prev + volume
        close < prev_close:  OBV = OBV_prev - volume
        otherwise:           OBV = OBV_prev

    The first bar has no previous close. With ``first_value='zero'`` (the
    default) OBV starts at 0.0; with ``first_value='volume'`` it starts at the
    first bar's volume. OBV is available from the first bar, and ``period``
    sizes the window of recent OBV values the stats queries run over.

    Example:
        >>> obv = OnBalanceVolume()
        >>> obv.update({'close': 10.0, 'volume': 500})
        >>> obv.update((10.5, 300))          # (close, volume)
        >>> obv.value
        300.0
    """

    required_inputs = ('close', 'volume')

    def __init__(self, period: int = 14, first_value: Literal['zero', 'volume'] = 'zero', dtype: Any = 'float64'):
        super().__init__(period, 'close', dtype)
        self._ready_threshold = 1

        if first_value not in ('zero', 'volume'):
            raise InvalidParameterError("first_value", first_value, "either 'zero' or 'volume'", self._name)
        self.first_value = first_value

        self._previous_close: Optional[Any] = None
        self._obv: Optional[Any] = None

    def update(self, data_point: Any) -> None:
        """
        Process a bar and update OBV.

        Args:
            data_point: Record with close and volume, or a ``(close, volume)`` tuple.

        Raises:
            MissingInputError: If close or volume is missing.
            InvalidDataError: If either is not a finite number.
        """
        close, volume = self._read_inputs(data_point)

        if self._previous_close is None:
            self._obv = volume if self.first_value == 'volume' else self._cast(0.0)
        elif close > self._previous_close:
            self._obv = self._obv + volume
        elif close < self._previous_close:
            self._obv = self._obv - volume
        self._previous_close = close

        self._update_metadata(data_point)
        self._store_output(self.value)

    @property
    def value(self) -> Optional[float]:
        return None if self._obv is None else float(self._obv)

    def reset(self) -> None:
        super().reset()
        self._previous_close = None
        self._obv = None
