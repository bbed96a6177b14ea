"""Configuration loading, logging setup and config-driven indicator construction."""

import yaml
import logging
import logging.config
from collections.abc import Mapping
from typing import Any, Dict, Union

from .base import BaseIndicator
from .exceptions import InvalidParameterError
from .factory import create

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    A utility class to load, manage, and provide access to configuration
    settings from a YAML file.
    """
    def __init__(self, config_path: str):
        """
        Initializes the ConfigLoader with the path to the configuration file.

        Args:
            config_path (str): The file path to the YAML configuration.
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Loads the YAML configuration file.

        Returns:
            Dict[str, Any]: A dictionary containing the configuration settings.
                An empty file yields an empty dictionary.

        Raises:
            FileNotFoundError: If the configuration file cannot be found.
            yaml.YAMLError: If the configuration file is malformed.
        """
        try:
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.error(f"Configuration file not found at '{self.config_path}'")
            raise
        except yaml.YAMLError as e:
            logger.error(f"Malformed YAML in configuration file: {e}")
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key with optional default."""
        return self.config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to config, e.g. config_loader['indicators']."""
        return self.config[key]

    def get_all(self) -> Dict[str, Any]:
        """Return entire configuration dictionary."""
        return self.config


def setup_logging(config: Dict[str, Any]) -> None:
    """Configure application logging with fallback to basic config."""
    try:
        logging.config.dictConfig(config)
        logging.info("Logging configured successfully from config file.")
    except (ValueError, TypeError, AttributeError) as e:
        # Fallback to a basic configuration if the one in the file is malformed
        logging.basicConfig(level=logging.INFO,
                            format="%(asctime)s - %(levelname)s - %(message)s")
        logging.warning(f"Could not configure logging from dict: {e}. Using basic config.")


def build_indicators(config: Union[ConfigLoader, Mapping]) -> Dict[str, BaseIndicator]:
    """
    Build fresh indicator instances from an ``indicators`` config section.

    The section maps a user-chosen name to the registry type and its
    constructor parameters:

        indicators:
          fast_ma: {type: ema, period: 12}
          bands:   {type: bbands, period: 20, k: 2.0}

    Args:
        config: A ConfigLoader, a full config mapping holding an
            ``indicators`` key, or the ``indicators`` mapping itself.

    Returns:
        Dict[str, BaseIndicator]: Indicators keyed by their configured name,
            in config order.

    Raises:
        InvalidParameterError: If an entry is not a mapping or lacks ``type``,
            or its parameters are rejected by the indicator.
        IndicatorNotFoundError: If ``type`` names no registered indicator.
    """
    if isinstance(config, ConfigLoader):
        section = config.get('indicators', {})
    elif 'indicators' in config:
        section = config['indicators']
    else:
        section = config

    if not isinstance(section, Mapping):
        raise InvalidParameterError("indicators", section, "mapping of name -> indicator entry")

    indicators = {}
    for name, entry in section.items():
        if not isinstance(entry, Mapping) or 'type' not in entry:
            raise InvalidParameterError("type", entry, f"indicator entry with a 'type' key for '{name}'")

        params = {key: value for key, value in entry.items() if key != 'type'}
        indicators[name] = create(entry['type'], **params)

    logger.info(f"Built {len(indicators)} indicators from config: {', '.join(indicators)}")
    return indicators
