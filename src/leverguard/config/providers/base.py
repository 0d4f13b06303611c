"""
Provider interface for leverguard settings.

A provider answers single-key lookups for ``LEVERGUARD_*`` and logging keys.
``ConfigManager`` asks each available provider in turn and takes the first
non-None answer.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class ConfigProvider(ABC):
    """Source of raw string settings."""

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Optional[str]:
        """Return the raw value for ``key`` or ``default``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether lookups against this source can succeed."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Label used when logging the provider chain."""
