"""
Configuration management system.

Resolves configuration keys from an ordered chain of providers.
"""

import logging
import threading
from typing import Any, Optional

from .providers.base import ConfigProvider
from .providers.dotenv_provider import DotEnvProvider
from .providers.env_provider import EnvVarProvider

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on", "enabled")


class ConfigManager:
    """
    Manages configuration from multiple sources with fallback support.

    Default priority order:
    1. Environment variables
    2. .env file
    """

    def __init__(self, providers: Optional[list[ConfigProvider]] = None):
        """
        Initialize ConfigManager with providers.

        Args:
            providers: List of configuration providers in priority order.
                      If None, uses default providers.
        """
        if providers is None:
            self.providers = [EnvVarProvider(), DotEnvProvider()]
        else:
            self.providers = providers

        available_providers = [p for p in self.providers if p.is_available()]
        if available_providers:
            logger.debug(
                "Configuration providers available: %s",
                [p.provider_name for p in available_providers],
            )
        else:
            logger.warning("No configuration providers available")

    def get(self, key: str, default: Optional[Any] = None) -> Optional[str]:
        """
        Get a configuration value from the first available provider.

        Args:
            key: Configuration key to retrieve
            default: Default value if key not found in any provider

        Returns:
            Configuration value or default
        """
        for provider in self.providers:
            if provider.is_available():
                value = provider.get(key)
                if value is not None:
                    return value

        return default

    def get_int(self, key: str, default: int = 0) -> int:
        """Get configuration value as integer"""
        value = self.get(key, str(default))
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid integer for %s: %r, using default %s", key, value, default)
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Get configuration value as float"""
        value = self.get(key, str(default))
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning("Invalid float for %s: %r, using default %s", key, value, default)
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get configuration value as boolean"""
        value = self.get(key)
        if value is None:
            return default

        return value.lower() in _TRUE_VALUES



_config_instance: Optional[ConfigManager] = None
_config_lock = threading.Lock()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        Global ConfigManager instance
    """
    global _config_instance

    if _config_instance is None:
        with _config_lock:
            # Double-check inside the lock
            if _config_instance is None:
                _config_instance = ConfigManager()

    return _config_instance


def set_config(config: Optional[ConfigManager]) -> None:
    """
    Set the global configuration instance. Passing None resets it.
    """
    global _config_instance
    _config_instance = config
