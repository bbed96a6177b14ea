"""Shared fixtures for the indicator test suite."""

import numpy as np
import pandas as pd
import pytest

from streamta.fields import Bar


@pytest.fixture
def closes():
    """Deterministic random-walk closing prices."""
    rng = np.random.default_rng(42)
    return (100.0 + np.cumsum(rng.normal(0.0, 1.0, 200))).tolist()


@pytest.fixture
def ohlcv_frame():
    """OHLCV DataFrame with a business-day index, consistent high >= close >= low."""
    rng = np.random.default_rng(7)
    close = 50.0 + np.cumsum(rng.normal(0.0, 0.5, 120))
    spread = rng.uniform(0.1, 1.5, 120)
    open_ = close + rng.normal(0.0, 0.2, 120)
    high = np.maximum(open_, close) + spread
    low = np.minimum(open_, close) - spread
    volume = rng.integers(1_000, 10_000, 120).astype(float)

    index = pd.bdate_range('2024-01-01', periods=120)
    return pd.DataFrame({'open': open_, 'high': high, 'low': low, 'close': close, 'volume': volume}, index=index)


@pytest.fixture
def bars(ohlcv_frame):
    """The OHLCV frame as a list of Bar records."""
    return [Bar(row.open, row.high, row.low, row.close, row.volume) for row in ohlcv_frame.itertuples()]
