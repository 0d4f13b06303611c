"""
Dotenv configuration provider.

This module provides configuration from .env files.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values

from .base import ConfigProvider

logger = logging.getLogger(__name__)


class DotEnvProvider(ConfigProvider):
    """Provider that reads configuration from a .env file, parsed once at construction"""

    def __init__(self, env_file: str = ".env"):
        self.env_file = Path(env_file)
        self._cache: dict[str, str] = {}
        self._loaded = False
        self._load_env_file()

    def _load_env_file(self) -> None:
        if not self.env_file.exists():
            return

        try:
            values = dotenv_values(self.env_file)
        except OSError as e:
            logger.warning("Failed to load %s: %s", self.env_file, e)
            return
        # Keys declared without a value parse as None
        self._cache = {k: v for k, v in values.items() if v is not None}
        self._loaded = True

    def get(self, key: str, default: Optional[Any] = None) -> Optional[str]:
        return self._cache.get(key, default)

    def is_available(self) -> bool:
        """Check if .env file exists and was loaded"""
        return self._loaded and bool(self._cache)

    @property
    def provider_name(self) -> str:
        return f".env file ({self.env_file})"
