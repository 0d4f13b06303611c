from __future__ import annotations

import json
import logging
import logging.config
from typing import Any

from leverguard.config import get_config
from leverguard.infrastructure.logging.context import get_context

# * Built-in LogRecord attributes; never overwritten or re-emitted as extras
_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
    }
)


class NamespacePrefixFilter(logging.Filter):
    """Prefixes logger names with 'lg.' for consistent namespacing."""

    _PREFIX = "lg."

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.name and not record.name.startswith(self._PREFIX):
            record.name = f"{self._PREFIX}{record.name}"
        return True


class ContextInjectorFilter(logging.Filter):
    """Injects structured context fields from contextvars into LogRecord."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for key, value in get_context().items():
            if key not in _RESERVED_FIELDS and not hasattr(record, key):
                setattr(record, key, value)
        return True


class MaxMessageLengthFilter(logging.Filter):
    """Truncates overly long messages to a max length with an indicator.

    Controlled via config LOG_MAX_MESSAGE_LEN (default 5000 characters).
    """

    def __init__(self) -> None:
        super().__init__()
        self.max_len = get_config().get_int("LOG_MAX_MESSAGE_LEN", 5000)

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if isinstance(record.msg, str) and len(record.msg) > self.max_len:
            record.msg = record.msg[: self.max_len] + "... [truncated]"
        return True


class SimpleJsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_FIELDS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def build_logging_config(level_name: str | None = None, json: bool = False) -> dict[str, Any]:
    cfg = get_config()
    level = (level_name or cfg.get("LOG_LEVEL", "INFO")).upper()

    if json:
        formatter = {
            "()": "leverguard.infrastructure.logging.config.SimpleJsonFormatter",
        }
    else:
        formatter = {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ns": {"()": "leverguard.infrastructure.logging.config.NamespacePrefixFilter"},
            "ctx": {"()": "leverguard.infrastructure.logging.config.ContextInjectorFilter"},
            "truncate": {"()": "leverguard.infrastructure.logging.config.MaxMessageLengthFilter"},
        },
        "formatters": {
            "default": formatter,
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
                "filters": ["ns", "ctx", "truncate"],
            }
        },
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(level_name: str | None = None, use_json: bool | None = None) -> None:
    cfg = get_config()
    # Explicit LOG_JSON wins, otherwise JSON in production-like environments
    if use_json is None:
        if cfg.get("LOG_JSON") is not None:
            use_json = cfg.get_bool("LOG_JSON")
        else:
            env_name = (cfg.get("ENV") or cfg.get("APP_ENV") or "").lower()
            use_json = env_name == "production"
    logging.config.dictConfig(build_logging_config(level_name, json=use_json))
