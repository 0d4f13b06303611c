"""Input guards for the position core.

Out-of-domain inputs are rejected with ``ValueError`` rather than silently
corrected.

Usage:
    from leverguard.position_management.validation import (
        validate_positive,
        validate_elapsed,
        ensure_open,
    )
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from leverguard.position_management.models import Position


def validate_positive(value: float, name: str = "value") -> float:
    """Return ``value`` as float if it is a positive finite number.

    Raises:
        ValueError: If value is boolean, non-numeric, non-finite or <= 0.

    Examples:
        >>> validate_positive(100.0, "entry_price")
        100.0
        >>> validate_positive(0, "entry_price")  # Raises ValueError
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {type(value).__name__}")

    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")

    return float(value)


def validate_elapsed(entry_time: datetime, now: datetime) -> float:
    """Seconds from ``entry_time`` to ``now``.

    Raises:
        ValueError: If ``now`` precedes ``entry_time`` or only one of the
            two carries a timezone.
    """
    if (entry_time.tzinfo is None) != (now.tzinfo is None):
        raise ValueError(
            f"Cannot compare naive and timezone-aware datetimes: "
            f"entry_time={entry_time.isoformat()}, now={now.isoformat()}"
        )
    elapsed = (now - entry_time).total_seconds()
    if elapsed < 0:
        raise ValueError(f"now ({now.isoformat()}) is before entry_time ({entry_time.isoformat()})")
    return elapsed


def ensure_open(position: Position, action: str) -> None:
    """Raise if ``position`` has already been closed."""
    if not position.is_open:
        raise ValueError(f"Cannot {action} position {position.id}: status is {position.status}")


__all__ = ["ensure_open", "validate_elapsed", "validate_positive"]
