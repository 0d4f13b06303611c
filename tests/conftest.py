"""
Pytest configuration and shared fixtures for the leverguard test suite.

Positions are built through the real factory with a fixed entry time so
that elapsed-time rules can be driven by passing explicit ``now`` values.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

from leverguard.config import ConfigManager, RiskLimits, TradingConfig, set_config
from leverguard.config.providers import EnvVarProvider
from leverguard.infrastructure.logging import clear_context
from leverguard.position_management import Position, PositionStatus, create_position

ENTRY_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Resolve configuration from a clean environment only (no .env file)."""
    for key in list(os.environ):
        if key.startswith("LEVERGUARD_"):
            monkeypatch.delenv(key, raising=False)
    set_config(ConfigManager(providers=[EnvVarProvider()]))
    clear_context()
    yield
    set_config(None)
    clear_context()


@pytest.fixture
def entry_time() -> datetime:
    return ENTRY_TIME


@pytest.fixture
def trading_config() -> TradingConfig:
    return TradingConfig()


@pytest.fixture
def risk_limits() -> RiskLimits:
    return RiskLimits()


@pytest.fixture
def long_position(trading_config, entry_time) -> Position:
    """Long 100.0, $500 collateral at 10x ($5,000 notional)."""
    return create_position(
        "long",
        100.0,
        500.0,
        "swing",
        config=trading_config,
        entry_time=entry_time,
        position_id="swing-test-long",
    )


@pytest.fixture
def short_position(trading_config, entry_time) -> Position:
    """Short 100.0, $500 collateral at 10x ($5,000 notional)."""
    return create_position(
        "short",
        100.0,
        500.0,
        "swing",
        config=trading_config,
        entry_time=entry_time,
        position_id="swing-test-short",
    )


def _at(seconds: float) -> datetime:
    return ENTRY_TIME + timedelta(seconds=seconds)


@pytest.fixture
def at():
    """Timestamp factory: ``at(400)`` is 400 seconds after entry."""
    return _at


def _closed_trade(
    pnl: float,
    exit_time: datetime,
    entry_time: datetime | None = None,
    position_id: str = "swing-closed",
    reason: str = "stop-loss",
    fees: float = 3.0,
) -> Position:
    """Closed ledger record for risk-gate and ledger-stat tests."""
    opened = entry_time or exit_time - timedelta(minutes=10)
    return Position(
        id=position_id,
        side="long",
        entry_price=100.0,
        entry_time=opened,
        collateral=500.0,
        leverage=10.0,
        mode="swing",
        stop_loss=99.5,
        take_profit=103.43,
        min_profit_target=5.0,
        max_profit_target=500.0,
        status=PositionStatus.CLOSED,
        exit_price=100.0,
        exit_time=exit_time,
        pnl=pnl,
        fees=fees,
        gross_pnl=pnl + fees,
        reason=reason,
    )


@pytest.fixture
def closed_trade():
    """Factory for closed ledger records."""
    return _closed_trade
