"""Tests for position models and the ledger schema."""

from dataclasses import replace

import pytest

from leverguard.config.constants import POSITION_SCHEMA_VERSION
from leverguard.position_management.models import (
    ExitReason,
    Position,
    PositionMutations,
    PositionSide,
    PositionStatus,
    StrategyMode,
)

pytestmark = pytest.mark.unit


class TestEnums:
    def test_side_from_string(self):
        assert PositionSide.from_string("Long") is PositionSide.LONG
        assert PositionSide.from_string("SHORT") is PositionSide.SHORT
        assert PositionSide.LONG.sign == 1
        assert PositionSide.SHORT.sign == -1

    def test_str_is_value(self):
        assert str(ExitReason.TIMEOUT_GREEN) == "timeout-green"
        assert str(StrategyMode.MEAN_REVERSION) == "mean_reversion"


class TestPosition:
    def test_coerces_enum_strings(self, long_position):
        position = replace(long_position, side="short", mode="momentum", status="open")
        assert position.side is PositionSide.SHORT
        assert position.mode is StrategyMode.MOMENTUM
        assert position.status is PositionStatus.OPEN

    def test_rejects_unknown_reason(self, long_position):
        with pytest.raises(ValueError, match="Invalid ExitReason"):
            replace(long_position, reason="panic")

    def test_hold_seconds(self, long_position, at):
        assert long_position.hold_seconds() is None
        assert long_position.hold_seconds(at(90)) == 90

    def test_schema_round_trip(self, closed_trade, at):
        trade = closed_trade(-12.5, at(600), reason="thesis-wrong")
        data = trade.to_dict()

        assert data["schema_version"] == POSITION_SCHEMA_VERSION
        assert data["reason"] == "thesis-wrong"
        assert isinstance(data["exit_time"], str)
        assert Position.from_dict(data) == trade

    def test_from_dict_rejects_other_version(self, long_position):
        data = long_position.to_dict()
        data["schema_version"] = POSITION_SCHEMA_VERSION + 1
        with pytest.raises(ValueError, match="schema version"):
            Position.from_dict(data)

    def test_from_dict_rejects_missing_fields(self, long_position):
        data = long_position.to_dict()
        del data["entry_price"]
        with pytest.raises(ValueError, match="Invalid position record"):
            Position.from_dict(data)


class TestPositionMutations:
    def test_changes_skip_unset_fields(self):
        mutations = PositionMutations(peak_gross_pnl=10.0, trailing_stop_active=True)
        assert mutations.changes() == {"peak_gross_pnl": 10.0, "trailing_stop_active": True}
        assert mutations

    def test_empty(self):
        assert PositionMutations().is_empty()
        assert not PositionMutations()
