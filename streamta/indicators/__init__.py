"""
Technical Analysis Indicators Module

Concrete implementations of streaming technical indicators built on BaseIndicator.
Provides O(1) indicators for trend, momentum, volatility and volume analysis.
"""

from .smoothing import SmoothingStrategy, WildersSmoothing, EmaSmoothing
from .trend import SMA, EMA, DEMA, McGinleyDynamic, LinearRegression
from .momentum import RSI, RateOfChange
from .volatility import Variance, StandardDeviation, TrueRange, AverageTrueRange
from .volume import OnBalanceVolume
from .composite import MACD, BollingerBands
from .cross import Cross, CrossType

__all__ = [
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
]
