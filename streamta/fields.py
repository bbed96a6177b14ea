"""
Field accessors for record-shaped inputs.

Indicators read scalars out of whatever the caller streams in. A data point
can be a bare number, a mapping (``{'close': 101.5, ...}``), any object that
exposes the field as an attribute or zero-argument method, or a tuple whose
positions follow the indicator's ``required_inputs``. Each indicator asks
only for the fields it actually uses, so a price-only feed never has to
provide volume.

The composite prices HL2, HLC3 and OHLC4 are derived from their component
fields whenever a record does not carry them itself.
"""

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .exceptions import InvalidDataError, MissingInputError

PRICE_FIELDS = ('open', 'high', 'low', 'close', 'volume')

COMPOSITE_FIELDS = {
    'hl2': ('high', 'low'),
    'hlc3': ('high', 'low', 'close'),
    'ohlc4': ('open', 'high', 'low', 'close'),
}

_MISSING = object()


@dataclass(frozen=True)
class Bar:
    """Plain OHLCV record satisfying every field accessor."""
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def hl2(self) -> float:
        return hl2(self)

    def hlc3(self) -> float:
        return hlc3(self)

    def ohlc4(self) -> float:
        return ohlc4(self)


def is_scalar(data_point: Any) -> bool:
    """True for plain real numbers (numpy scalars included, bools excluded)."""
    return isinstance(data_point, numbers.Real) and not isinstance(data_point, bool)


def _lookup(record: Any, field: str) -> Any:
    if isinstance(record, Mapping) or hasattr(record, 'keys'):
        return record[field] if field in record.keys() else _MISSING

    value = getattr(record, field, _MISSING)
    if value is not _MISSING and callable(value):
        value = value()
    return value


def extract(record: Any, field: str, indicator_name: Optional[str] = None) -> Any:
    """
    Read one field from a record.

    Args:
        record: Mapping or object carrying the field.
        field (str): Field name, or one of the composites 'hl2', 'hlc3', 'ohlc4'.
        indicator_name (Optional[str]): Indicator reported in raised errors.

    Returns:
        The raw field value. Derived composites are averaged from validated
        components, so they are always finite floats.

    Raises:
        MissingInputError: If the record has no such field and it cannot be derived.
        InvalidDataError: If a component of a derived composite is not a finite number.
    """
    value = _lookup(record, field)
    if value is not _MISSING:
        return value

    if field not in COMPOSITE_FIELDS:
        raise MissingInputError([field], [field], indicator_name)
    return _composite(record, field, indicator_name)


def _composite(record: Any, field: str, indicator_name: Optional[str] = None) -> float:
    components = COMPOSITE_FIELDS[field]
    parts = extract_many(record, components, indicator_name)
    values = [validate_value(name, part, indicator_name) for name, part in zip(components, parts)]
    return math.fsum(values) / len(values)


def extract_many(record: Any, fields: Sequence[str], indicator_name: Optional[str] = None) -> List[Any]:
    """
    Read several fields from a data point in ``fields`` order.

    Scalars satisfy a single field. Tuples and lists are matched positionally.
    Everything else goes through :func:`extract` field by field, and all
    missing fields are reported together.

    Raises:
        MissingInputError: If any requested field is unavailable.
    """
    fields = list(fields)

    if is_scalar(record):
        if len(fields) == 1:
            return [record]
        raise MissingInputError(fields[1:], fields, indicator_name)

    if isinstance(record, (tuple, list)) and not hasattr(record, '_fields'):
        if len(record) < len(fields):
            raise MissingInputError(fields[len(record):], fields, indicator_name)
        return list(record[:len(fields)])

    values = []
    missing = []
    for field in fields:
        try:
            values.append(extract(record, field, indicator_name))
        except MissingInputError:
            missing.append(field)
    if missing:
        raise MissingInputError(missing, fields, indicator_name)
    return values


def validate_value(field: str, value: Any, indicator_name: Optional[str] = None) -> float:
    """
    Check an extracted value is a finite real number.

    Raises:
        InvalidDataError: For None, non-numeric, NaN or infinite values.
    """
    if value is None:
        raise InvalidDataError(field, value, "value is None", indicator_name)
    if not is_scalar(value):
        raise InvalidDataError(field, value, "value is not a real number", indicator_name)
    if math.isnan(value):
        raise InvalidDataError(field, value, "value is NaN", indicator_name)
    if math.isinf(value):
        raise InvalidDataError(field, value, "value is infinite", indicator_name)
    return value


def hl2(record: Any) -> float:
    """Average of high and low."""
    return _composite(record, 'hl2')


def hlc3(record: Any) -> float:
    """Average of high, low and close."""
    return _composite(record, 'hlc3')


def ohlc4(record: Any) -> float:
    """Average of open, high, low and close."""
    return _composite(record, 'ohlc4')
