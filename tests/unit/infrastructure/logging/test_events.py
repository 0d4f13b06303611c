"""Tests for infrastructure.logging.events module."""

import logging
from unittest.mock import patch

import pytest

from leverguard.infrastructure.logging.events import (
    log_engine_warning,
    log_exit_event,
    log_position_event,
    log_risk_event,
)

pytestmark = pytest.mark.unit

EVENTS = "leverguard.infrastructure.logging.events"


class TestEventEmitters:
    @pytest.mark.parametrize(
        "emitter,event_type,level",
        [
            (log_position_event, "position_event", logging.INFO),
            (log_exit_event, "exit_event", logging.INFO),
            (log_risk_event, "risk_event", logging.INFO),
            (log_engine_warning, "engine_event", logging.WARNING),
        ],
    )
    def test_level_and_event_type(self, emitter, event_type, level):
        with patch(f"{EVENTS}._logger") as mock_logger:
            emitter("message")
        args, kwargs = mock_logger.log.call_args
        assert args[0] == level
        assert args[1] == "message"
        assert kwargs["extra"]["event_type"] == event_type

    def test_fields_passed_as_extra(self):
        with patch(f"{EVENTS}._logger") as mock_logger:
            log_exit_event("Exit", position_id="swing-1", reason="trailing-stop", net_pnl=4.2)
        extra = mock_logger.log.call_args[1]["extra"]
        assert extra["position_id"] == "swing-1"
        assert extra["reason"] == "trailing-stop"
        assert extra["net_pnl"] == 4.2


class TestContextIntegration:
    def test_context_merged_into_event(self):
        with patch(f"{EVENTS}._logger") as mock_logger:
            with patch(f"{EVENTS}.get_context", return_value={"tick_id": "abc123"}):
                log_risk_event("Blocked", check="rate-limit")
        extra = mock_logger.log.call_args[1]["extra"]
        assert extra["tick_id"] == "abc123"
        assert extra["check"] == "rate-limit"

    def test_explicit_fields_override_context(self):
        with patch(f"{EVENTS}._logger") as mock_logger:
            with patch(f"{EVENTS}.get_context", return_value={"position_id": "ctx"}):
                log_position_event("Opened", position_id="explicit")
        assert mock_logger.log.call_args[1]["extra"]["position_id"] == "explicit"
