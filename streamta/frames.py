"""
pandas bridge for streaming indicators.

Replays a Series or DataFrame through an indicator and collects the value
after every row, so streaming results line up with vectorised research code.
"""

import logging
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd

from .base import BaseIndicator

logger = logging.getLogger(__name__)


def run(indicator: BaseIndicator, data: Union[pd.Series, pd.DataFrame],
        name: Optional[str] = None) -> Union[pd.Series, pd.DataFrame]:
    """
    Stream ``data`` through ``indicator`` and return its values per row.

    DataFrame rows are passed as ``{column: value}`` records, Series values as
    plain numbers. The indicator keeps its state afterwards, so later live
    updates continue from the last row.

    Args:
        indicator: Indicator to update, typically freshly constructed.
        data: Input rows. DataFrame columns must cover the indicator's inputs.
        name: Name for the returned Series. Defaults to the indicator class
            name in lower case.

    Returns:
        pd.Series of floats for scalar indicators, pd.DataFrame with one
        column per line for dict-valued indicators (MACD, Bollinger Bands),
        or an object Series for Cross. Warm-up rows hold NaN (None for Cross).
        Both are aligned to ``data.index``.

    Raises:
        TypeError: If data is neither a Series nor a DataFrame.
        MissingInputError: If a row lacks a field the indicator reads.
        InvalidDataError: If a row holds NaN or another invalid value.
    """
    if isinstance(data, pd.DataFrame):
        records: List[Any] = data.to_dict('records')
    elif isinstance(data, pd.Series):
        records = data.tolist()
    else:
        raise TypeError(f"Expected pandas Series or DataFrame, got {type(data).__name__}")

    values = []
    for record in records:
        indicator.update(record)
        values.append(indicator.value)

    logger.debug(f"Ran {indicator!r} over {len(records)} rows")

    if any(isinstance(v, dict) for v in values):
        return pd.DataFrame([v if v is not None else {} for v in values], index=data.index)

    name = name or indicator.__class__.__name__.lower()
    if all(v is None or isinstance(v, float) for v in values):
        return pd.Series([np.nan if v is None else v for v in values], index=data.index, name=name, dtype=float)
    return pd.Series(values, index=data.index, name=name, dtype=object)
