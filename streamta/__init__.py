"""
Streaming Technical Analysis Library

A streaming technical indicator library for event-driven backtesting and
real-time trading applications. Every indicator is updated one sample at a
time in O(1) and answers ``None`` until it has seen enough data.

This library provides:
- Factory pattern for indicator creation by name or alias
- O(1) streaming indicator updates on rolling windows and exponential recursions
- Abstract base class ensuring consistent indicator interfaces
- Composite pattern support for hierarchical indicators (MACD, DEMA, Bollinger Bands)
- Field accessors for numbers, dicts, OHLCV objects and tuples
- YAML configuration and a pandas bridge for research workflows

Example Usage:
    import streamta as ta

    # Factory pattern - primary interface
    sma = ta.create('sma', period=20)
    macd = ta.create('macd', fast_period=12, slow_period=26, signal_period=9)

    # Direct class access
    sma = ta.SMA(period=20)
    bbands = ta.BollingerBands(period=20, k=2.0)

    # Utility functions
    indicators = ta.list_indicators()
    info = ta.describe('rsi')
"""

__version__ = "1.0.0"
__author__ = "Meluna Development Team"

# Public API exports
from .base import BaseIndicator, validate_period, validate_alpha, validate_k_factor, validate_input_field
from .window import RollingWindow
from .fields import Bar, extract, hl2, hlc3, ohlc4
from .exceptions import (
    IndicatorError,
    InvalidParameterError,
    InvalidPeriodError,
    MissingInputError,
    InsufficientDataError,
    InvalidDataError,
    IndicatorNotFoundError
)
from .indicators import (
    SMA, EMA, DEMA, McGinleyDynamic, LinearRegression,
    RSI, RateOfChange,
    Variance, StandardDeviation, TrueRange, AverageTrueRange,
    OnBalanceVolume,
    MACD, BollingerBands,
    Cross, CrossType,
    SmoothingStrategy, WildersSmoothing, EmaSmoothing
)
from .factory import create, list_indicators, describe
from .core import ConfigLoader, setup_logging, build_indicators
from . import frames

__all__ = [
    # Core classes
    "BaseIndicator",
    "RollingWindow",

    # Factory functions
    "create",
    "list_indicators",
    "describe",

    # Trend indicators
    "SMA",
    "EMA",
    "DEMA",
    "McGinleyDynamic",
    "LinearRegression",

    # Momentum indicators
    "RSI",
    "RateOfChange",

    # Volatility indicators
    "Variance",
    "StandardDeviation",
    "TrueRange",
    "AverageTrueRange",

    # Volume indicators
    "OnBalanceVolume",

    # Composite indicators
    "MACD",
    "BollingerBands",

    # Crossovers
    "Cross",
    "CrossType",

    # Smoothing strategies
    "SmoothingStrategy",
    "WildersSmoothing",
    "EmaSmoothing",

    # Field accessors
    "Bar",
    "extract",
    "hl2",
    "hlc3",
    "ohlc4",

    # Configuration and logging
    "ConfigLoader",
    "setup_logging",
    "build_indicators",
    "frames",

    # Validation utilities
    "validate_period",
    "validate_alpha",
    "validate_k_factor",
    "validate_input_field",

    # Exceptions
    "IndicatorError",
    "InvalidParameterError",
    "InvalidPeriodError",
    "MissingInputError",
    "InsufficientDataError",
    "InvalidDataError",
    "IndicatorNotFoundError",

    # Metadata
    "__version__",
    "__author__",
]
