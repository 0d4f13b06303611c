"""
Environment variable configuration provider.
"""

import os
from typing import Any, Optional

from .base import ConfigProvider


class EnvVarProvider(ConfigProvider):
    """Provider that reads configuration from environment variables"""

    def get(self, key: str, default: Optional[Any] = None) -> Optional[str]:
        return os.getenv(key, default)

    def is_available(self) -> bool:
        """Environment variables are always available"""
        return True

    @property
    def provider_name(self) -> str:
        return "Environment Variables"
