"""Position closer.

Turns an open position into its closed ledger record. The dollar loss cap is
enforced again here so that no close path can book a loss beyond it.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from leverguard.config.settings import TradingConfig, load_trading_config
from leverguard.infrastructure.logging.events import log_position_event
from leverguard.position_management.models import ExitReason, Position, PositionStatus
from leverguard.position_management.pnl import calculate_pnl
from leverguard.position_management.validation import (
    ensure_open,
    validate_elapsed,
    validate_positive,
)


def capped_net_pnl(net_pnl: float, fees: float, max_loss_dollars: float) -> float:
    """Net P&L floored at the loss cap plus fees."""
    return max(net_pnl, -max_loss_dollars - fees)


def close_position(
    position: Position,
    exit_price: float,
    reason: ExitReason | str,
    *,
    now: datetime | None = None,
    config: TradingConfig | None = None,
) -> Position:
    """Close ``position`` at ``exit_price``.

    Args:
        position: Open position to close.
        exit_price: Fill price (> 0).
        reason: ExitReason or its string value (e.g. ``"trailing-stop"``).
        now: Exit time (defaults to now, UTC).
        config: Trading configuration (defaults to the loaded configuration).

    Returns:
        A new closed Position carrying exit price/time, capped net pnl,
        fees, gross pnl and reason.

    Raises:
        ValueError: If the position is already closed, the exit price is not
            positive, ``now`` precedes entry, or the reason is unknown.
    """
    ensure_open(position, "close")
    exit_price = validate_positive(exit_price, "exit_price")
    if not isinstance(reason, ExitReason):
        try:
            reason = ExitReason(str(reason).lower())
        except ValueError as exc:
            raise ValueError(f"Invalid exit reason: {reason}") from exc
    cfg = config or load_trading_config()
    closed_at = now or datetime.now(timezone.utc)
    hold_seconds = validate_elapsed(position.entry_time, closed_at)

    snapshot = calculate_pnl(position, exit_price, cfg.fees)
    pnl = capped_net_pnl(snapshot.net_pnl, snapshot.fees, cfg.exits.absolute_max_loss_dollars)

    closed = replace(
        position,
        status=PositionStatus.CLOSED,
        exit_price=exit_price,
        exit_time=closed_at,
        pnl=pnl,
        fees=snapshot.fees,
        gross_pnl=snapshot.gross_pnl_dollars,
        reason=reason,
    )

    log_position_event(
        f"Closed {position.side.value} position {position.id} ({reason.value}) "
        f"pnl ${pnl:+.2f}",
        position_id=position.id,
        reason=reason.value,
        exit_price=exit_price,
        pnl=pnl,
        fees=snapshot.fees,
        gross_pnl=snapshot.gross_pnl_dollars,
        hold_seconds=hold_seconds,
        loss_capped=pnl != snapshot.net_pnl,
    )
    return closed


__all__ = ["capped_net_pnl", "close_position"]
