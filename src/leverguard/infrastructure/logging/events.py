from __future__ import annotations

import logging
from typing import Any

from leverguard.infrastructure.logging.context import get_context

_logger = logging.getLogger(__name__)


def _emit(event_type: str, level: int, message: str, **fields: Any) -> None:
    payload: dict[str, Any] = {"event_type": event_type}
    # Context first, explicit fields win
    payload.update(get_context())
    payload.update(fields)
    _logger.log(level, message, extra=payload)


# Position lifecycle


def log_position_event(message: str, **fields: Any) -> None:
    _emit("position_event", logging.INFO, message, **fields)


def log_exit_event(message: str, **fields: Any) -> None:
    _emit("exit_event", logging.INFO, message, **fields)


# Risk management


def log_risk_event(message: str, **fields: Any) -> None:
    _emit("risk_event", logging.INFO, message, **fields)


def log_engine_warning(message: str, **fields: Any) -> None:
    _emit("engine_event", logging.WARNING, message, **fields)
