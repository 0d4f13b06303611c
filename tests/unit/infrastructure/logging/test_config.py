"""Tests for infrastructure.logging.config module."""

import json
import logging
from unittest.mock import patch

import pytest

from leverguard.infrastructure.logging.config import (
    ContextInjectorFilter,
    MaxMessageLengthFilter,
    NamespacePrefixFilter,
    SimpleJsonFormatter,
    build_logging_config,
    configure_logging,
)
from leverguard.infrastructure.logging.context import use_context

pytestmark = pytest.mark.unit


def _record(msg="hello", name="leverguard.risk.risk_gate", **extra):
    record = logging.LogRecord(
        name=name, level=logging.INFO, pathname="", lineno=0, msg=msg, args=(), exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFilters:
    def test_namespace_prefix_applied_once(self):
        record = _record()
        NamespacePrefixFilter().filter(record)
        NamespacePrefixFilter().filter(record)
        assert record.name == "lg.leverguard.risk.risk_gate"

    def test_context_injected_without_overwriting(self):
        record = _record(position_id="explicit")
        with use_context(tick_id="t1", position_id="ctx"):
            ContextInjectorFilter().filter(record)
        assert record.tick_id == "t1"
        assert record.position_id == "explicit"

    def test_long_messages_truncated(self, monkeypatch):
        monkeypatch.setenv("LOG_MAX_MESSAGE_LEN", "10")
        record = _record(msg="x" * 50)
        MaxMessageLengthFilter().filter(record)
        assert record.msg == "x" * 10 + "... [truncated]"


class TestJsonFormatter:
    def test_emits_extras(self):
        record = _record(event_type="exit_event", reason="timeout-red")
        payload = json.loads(SimpleJsonFormatter().format(record))
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["event_type"] == "exit_event"
        assert payload["reason"] == "timeout-red"


class TestConfigureLogging:
    def test_plain_config(self):
        config = build_logging_config("debug")
        assert config["root"]["level"] == "DEBUG"
        assert "format" in config["formatters"]["default"]
        assert config["handlers"]["console"]["filters"] == ["ns", "ctx", "truncate"]

    def test_json_config(self):
        config = build_logging_config("INFO", json=True)
        assert config["formatters"]["default"]["()"].endswith("SimpleJsonFormatter")

    def test_log_json_flag_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.setenv("ENV", "development")
        with patch("logging.config.dictConfig") as mock_dict_config:
            configure_logging("INFO")
        config = mock_dict_config.call_args[0][0]
        assert "()" in config["formatters"]["default"]

    def test_production_defaults_to_json(self, monkeypatch):
        monkeypatch.delenv("LOG_JSON", raising=False)
        monkeypatch.setenv("ENV", "production")
        with patch("logging.config.dictConfig") as mock_dict_config:
            configure_logging()
        config = mock_dict_config.call_args[0][0]
        assert "()" in config["formatters"]["default"]
