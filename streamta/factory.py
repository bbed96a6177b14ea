"""Factory for creating technical indicators."""

import inspect
import logging
from typing import Any, Dict, List, Optional, Type

from .base import BaseIndicator
from .exceptions import IndicatorNotFoundError, InvalidParameterError
from .indicators.composite import MACD, BollingerBands
from .indicators.cross import Cross
from .indicators.momentum import RSI, RateOfChange
from .indicators.trend import DEMA, EMA, SMA, LinearRegression, McGinleyDynamic
from .indicators.volatility import AverageTrueRange, StandardDeviation, TrueRange, Variance
from .indicators.volume import OnBalanceVolume

logger = logging.getLogger(__name__)


class IndicatorRegistry:
    """Registry for managing indicators with aliases."""

    def __init__(self):
        """Initialize registry with built-in indicators."""
        self._registry: Dict[str, Type[BaseIndicator]] = {}
        self._canonical: Dict[Type[BaseIndicator], str] = {}
        self._register_builtin_indicators()

    def _register_builtin_indicators(self) -> None:
        """Register built-in indicators."""
        # Trend indicators
        self.register('sma', SMA, aliases=['simple_ma', 'simple_moving_average'])
        self.register('ema', EMA, aliases=['exp_ma', 'exponential_moving_average'])
        self.register('dema', DEMA, aliases=['double_ema', 'double_exponential_moving_average'])
        self.register('mcginley_dynamic', McGinleyDynamic, aliases=['mcginley', 'md'])
        self.register('linear_regression', LinearRegression, aliases=['linreg', 'lr'])

        # Momentum indicators
        self.register('rsi', RSI, aliases=['relative_strength_index'])
        self.register('roc', RateOfChange, aliases=['rate_of_change'])

        # Volatility indicators
        self.register('variance', Variance, aliases=['var'])
        self.register('standard_deviation', StandardDeviation, aliases=['stddev', 'std_dev', 'stdev'])
        self.register('true_range', TrueRange, aliases=['tr'])
        self.register('atr', AverageTrueRange, aliases=['average_true_range'])

        # Volume indicators
        self.register('obv', OnBalanceVolume, aliases=['on_balance_volume'])

        # Composite indicators
        self.register('macd', MACD, aliases=['moving_average_convergence_divergence'])
        self.register('bollinger_bands', BollingerBands, aliases=['bbands', 'bb'])

        # Crossovers
        self.register('cross', Cross, aliases=['crossover'])

    def register(self, name: str, indicator_class: Type[BaseIndicator], aliases: Optional[List[str]] = None) -> None:
        """Register indicator with aliases."""
        name_lower = name.lower()
        self._registry[name_lower] = indicator_class
        self._canonical[indicator_class] = name_lower

        if aliases:
            for alias in aliases:
                self._registry[alias.lower()] = indicator_class

    def get(self, name: str) -> Type[BaseIndicator]:
        """Get indicator class by name."""
        name_lower = name.lower()
        if name_lower not in self._registry:
            raise IndicatorNotFoundError(name, self.list_indicators())

        return self._registry[name_lower]

    def list_indicators(self) -> List[str]:
        """List canonical indicator names, without aliases."""
        return sorted(self._canonical.values())

    def get_aliases(self, name: str) -> List[str]:
        """
        Get all aliases for an indicator.

        Args:
            name (str): Indicator name

        Returns:
            List[str]: List of all names (including aliases) for the indicator
        """
        try:
            target_class = self.get(name)
            return [key for key, cls in self._registry.items() if cls == target_class]
        except IndicatorNotFoundError:
            return []


# Global registry instance
_REGISTRY = IndicatorRegistry()


def create(name: str, **kwargs) -> BaseIndicator:
    """
    Factory function to create technical indicators by name.

    This is the primary entry point for creating indicators. Provides
    case-insensitive indicator creation with parameter validation.

    Args:
        name (str): Name of the indicator to create (case-insensitive).
            Available indicators can be listed using list_indicators().
        **kwargs: Parameters to pass to the indicator constructor.
            Common parameters:
            - period (int): Lookback period for calculations
            - input_field (str): Input field ('open', 'high', 'low', 'close',
              'volume', 'hl2', 'hlc3', 'ohlc4')
            - dtype (str): numpy floating dtype ('float64', 'float32')
            - Additional parameters depend on the specific indicator

    Returns:
        BaseIndicator: Configured indicator instance ready for use

    Raises:
        IndicatorNotFoundError: If the indicator name is not recognized
        InvalidParameterError: If parameters are invalid or missing

    Examples:
        >>> import streamta as ta
        >>> sma = ta.create('sma', period=20)
        >>> ema = ta.create('ema', period=12, alpha=0.15)
        >>> macd = ta.create('MACD', fast_period=12, slow_period=26, signal_period=9)
        >>> bbands = ta.create('bbands', period=20, k=2.0)
        >>> typical = ta.create('sma', period=10, input_field='hlc3')
    """
    indicator_class = _REGISTRY.get(name)
    try:
        indicator = indicator_class(**kwargs)
    except TypeError as e:
        # Convert constructor errors to our custom exception
        sig = inspect.signature(indicator_class.__init__)
        params = list(sig.parameters.keys())[1:]  # Skip 'self'

        raise InvalidParameterError(
            parameter_name="constructor",
            value=str(kwargs),
            expected=f"valid parameters for {name}: {params}",
            indicator_name=name
        ) from e

    logger.debug(f"Created {indicator!r} from '{name}'")
    return indicator


def list_indicators() -> List[str]:
    """
    Get a list of all available indicator names.

    Returns:
        List[str]: Alphabetically sorted list of canonical indicator names

    Example:
        >>> import streamta as ta
        >>> 'sma' in ta.list_indicators()
        True
    """
    return _REGISTRY.list_indicators()


def describe(name: str) -> Dict[str, Any]:
    """
    Get detailed information about an indicator including parameters and documentation.

    Args:
        name (str): Name of the indicator to describe (case-insensitive)

    Returns:
        Dict[str, Any]: Dictionary containing:
            - name: Canonical class name
            - aliases: List of alternative names
            - parameters: Parameter information from constructor signature
            - docstring: Class documentation
            - required_inputs: Required input fields for the indicator

    Raises:
        IndicatorNotFoundError: If the indicator name is not recognized

    Example:
        >>> import streamta as ta
        >>> info = ta.describe('macd')
        >>> info['name']
        'MACD'
    """
    indicator_class = _REGISTRY.get(name)

    # Extract parameter information from constructor signature
    sig = inspect.signature(indicator_class.__init__)
    parameters = {}

    for param_name, param in sig.parameters.items():
        if param_name == 'self':
            continue

        param_info = {
            'type': param.annotation if param.annotation != inspect.Parameter.empty else 'Any',
            'default': param.default if param.default != inspect.Parameter.empty else None,
            'required': param.default == inspect.Parameter.empty
        }
        parameters[param_name] = param_info

    return {
        'name': indicator_class.__name__,
        'aliases': _REGISTRY.get_aliases(name),
        'parameters': parameters,
        'docstring': indicator_class.__doc__,
        'required_inputs': getattr(indicator_class, 'required_inputs', ()),
    }
