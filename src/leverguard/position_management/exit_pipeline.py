"""Exit evaluation pipeline.

``update_position`` marks one open position at the current price and decides
whether it must close. Hard limits run first and can never be pre-empted by
a profit rule; trailing-stop state is updated next and returned as a delta
alongside whatever decision follows.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from leverguard.config.settings import TradingConfig, load_trading_config
from leverguard.infrastructure.logging.events import log_exit_event
from leverguard.position_management.exit_rules import (
    POST_TRAILING_RULES,
    PRE_TRAILING_RULES,
    ExitContext,
    ExitDecision,
    first_decision,
)
from leverguard.position_management.models import Position, PositionMutations, PositionUpdate
from leverguard.position_management.pnl import calculate_pnl
from leverguard.position_management.trailing_stops import TrailingStopPolicy
from leverguard.position_management.validation import (
    ensure_open,
    validate_elapsed,
    validate_positive,
)

logger = logging.getLogger(__name__)


def effective_max_hold_seconds(
    config: TradingConfig, override_max_hold_seconds: float | None = None
) -> float:
    """Timeout for one evaluation; never above the absolute hold cap."""
    if override_max_hold_seconds is not None:
        requested = validate_positive(override_max_hold_seconds, "override_max_hold_seconds")
    else:
        requested = config.max_trade_seconds
    return min(requested, config.exits.absolute_max_hold_seconds)


def update_position(
    position: Position,
    current_price: float,
    override_max_hold_seconds: float | None = None,
    *,
    now: datetime | None = None,
    config: TradingConfig | None = None,
) -> PositionUpdate:
    """Evaluate ``position`` at ``current_price``.

    The position is never modified. Trailing-stop changes are returned in
    ``PositionUpdate.mutations`` for the caller to merge with
    ``apply_mutations`` (or to discard when closing).

    Args:
        position: Open position to evaluate.
        current_price: Mark price (> 0).
        override_max_hold_seconds: Per-position timeout; capped at the
            absolute hold limit.
        now: Evaluation time (defaults to now, UTC).
        config: Trading configuration (defaults to the loaded configuration).

    Returns:
        PositionUpdate describing hold, hold-with-mutations or close.

    Raises:
        ValueError: If the position is closed, the price is not positive,
            or ``now`` precedes the entry time.
    """
    ensure_open(position, "evaluate")
    current_price = validate_positive(current_price, "current_price")
    cfg = config or load_trading_config()
    now = now or datetime.now(timezone.utc)

    ctx = ExitContext(
        position=position,
        current_price=current_price,
        elapsed_seconds=validate_elapsed(position.entry_time, now),
        pnl=calculate_pnl(position, current_price, cfg.fees),
        thresholds=cfg.exits,
        max_hold_seconds=effective_max_hold_seconds(cfg, override_max_hold_seconds),
    )

    decision = first_decision(PRE_TRAILING_RULES, ctx)
    if decision is not None:
        return _close(position, ctx, decision, None)

    mutations = TrailingStopPolicy.from_thresholds(cfg.exits).evaluate(
        position, current_price, ctx.pnl
    )
    carried = mutations if mutations else None

    decision = first_decision(POST_TRAILING_RULES, ctx)
    if decision is not None:
        return _close(position, ctx, decision, carried)

    if carried is not None:
        logger.debug("Position %s holds with trailing updates %s", position.id, carried.changes())
    return PositionUpdate(should_close=False, mutations=carried)


def _close(
    position: Position,
    ctx: ExitContext,
    decision: ExitDecision,
    mutations: PositionMutations | None,
) -> PositionUpdate:
    log_exit_event(
        f"Exit {decision.reason.value} for {position.id}: {decision.detail}",
        position_id=position.id,
        reason=decision.reason.value,
        exit_price=decision.exit_price,
        net_pnl=ctx.net_pnl,
        elapsed_seconds=ctx.elapsed_seconds,
    )
    return PositionUpdate(
        should_close=True,
        reason=decision.reason,
        exit_price=decision.exit_price,
        mutations=mutations,
        detail=decision.detail,
    )


__all__ = ["effective_max_hold_seconds", "update_position"]
