"""Pre-trade risk gate.

Runs before a new position is opened and refuses entry when recent trading
activity breaches a limit. Checks run in a fixed order and the first failure
is reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from leverguard.config.constants import (
    DAILY_LOSS_WINDOW_SECONDS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from leverguard.config.settings import RiskLimits, load_risk_limits
from leverguard.infrastructure.logging.events import log_risk_event
from leverguard.position_management.models import Position

logger = logging.getLogger(__name__)


class RiskCheck(str, Enum):
    """Name of the gate check that refused an entry."""

    RATE_LIMIT = "rate-limit"
    CONSECUTIVE_LOSSES = "consecutive-losses"
    DAILY_LOSS = "daily-loss"
    BALANCE = "balance"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RiskGateResult:
    """Outcome of ``check_risk_gate``.

    Attributes:
        allowed: Whether a new position may be opened.
        reason: Human-readable explanation when refused.
        check: Which check refused the entry.
    """

    allowed: bool
    reason: str | None = None
    check: RiskCheck | None = None

    def __bool__(self) -> bool:
        return self.allowed


def _closed_trades(positions: Iterable[Position]) -> list[Position]:
    return [p for p in positions if p.is_closed and p.exit_time is not None]


def count_consecutive_losses(positions: Iterable[Position]) -> tuple[int, Position | None]:
    """Length of the most-recent-first losing streak and its latest trade."""
    closed = sorted(_closed_trades(positions), key=lambda p: p.exit_time, reverse=True)
    streak = 0
    for trade in closed:
        if (trade.pnl or 0.0) < 0:
            streak += 1
        else:
            break
    return streak, (closed[0] if closed else None)


def daily_pnl(positions: Iterable[Position], now: datetime) -> float:
    """Sum of realized pnl for trades closed within the last 24 hours."""
    since = now - timedelta(seconds=DAILY_LOSS_WINDOW_SECONDS)
    return sum((p.pnl or 0.0) for p in _closed_trades(positions) if p.exit_time >= since)


def check_risk_gate(
    recent_positions: Iterable[Position],
    current_balance: float,
    *,
    now: datetime | None = None,
    limits: RiskLimits | None = None,
) -> RiskGateResult:
    """Decide whether a new position may be opened.

    Args:
        recent_positions: Recent trade history, open and closed.
        current_balance: Account balance in USD.
        now: Evaluation time (defaults to now, UTC).
        limits: Risk limits (defaults to the loaded configuration).

    Returns:
        RiskGateResult; ``allowed`` is False with a reason for the first
        failing check.
    """
    limits = limits or load_risk_limits()
    now = now or datetime.now(timezone.utc)
    history = list(recent_positions)

    # Rate limit
    window_start = now - timedelta(seconds=RATE_LIMIT_WINDOW_SECONDS)
    recent_entries = sum(1 for p in history if p.entry_time >= window_start)
    if recent_entries >= limits.max_trades_per_hour:
        return _refuse(
            RiskCheck.RATE_LIMIT,
            f"Rate limit: {recent_entries}/{limits.max_trades_per_hour} trades/hour",
        )

    # Consecutive losses
    streak, latest = count_consecutive_losses(history)
    if streak >= limits.max_consecutive_losses and latest is not None:
        pause_until = latest.exit_time + timedelta(minutes=limits.pause_after_losses_minutes)
        if now < pause_until:
            remaining = (pause_until - now).total_seconds() / 60.0
            return _refuse(
                RiskCheck.CONSECUTIVE_LOSSES,
                f"Pause: {streak} consecutive losses, {remaining:.1f}min remaining",
            )

    # Daily loss
    day_pnl = daily_pnl(history, now)
    if day_pnl <= -limits.max_daily_loss_dollars:
        return _refuse(
            RiskCheck.DAILY_LOSS,
            f"Daily loss limit: ${day_pnl:.2f} / -${limits.max_daily_loss_dollars:.2f}",
        )
    day_loss_pct = abs(day_pnl) / limits.initial_balance * 100.0
    if day_pnl < 0 and day_loss_pct >= limits.max_daily_loss_percent:
        return _refuse(
            RiskCheck.DAILY_LOSS,
            f"Daily loss %: {day_loss_pct:.1f}% / {limits.max_daily_loss_percent:.1f}%",
        )

    # Balance sanity
    floor = limits.initial_balance * limits.min_balance_fraction
    if current_balance < floor:
        return _refuse(
            RiskCheck.BALANCE,
            f"Balance too low: ${current_balance:.2f} (< ${floor:.2f})",
        )

    logger.debug(
        "Risk gate passed: %d entries/hour, %d-loss streak, daily pnl $%.2f",
        recent_entries,
        streak,
        day_pnl,
    )
    return RiskGateResult(allowed=True)


def _refuse(check: RiskCheck, reason: str) -> RiskGateResult:
    log_risk_event(f"Entry blocked: {reason}", check=check.value)
    return RiskGateResult(allowed=False, reason=reason, check=check)


__all__ = [
    "RiskCheck",
    "RiskGateResult",
    "check_risk_gate",
    "count_consecutive_losses",
    "daily_pnl",
]
