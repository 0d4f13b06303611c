"""Per-tick driver for caller-owned positions.

PositionMonitor ties the position core together for one evaluation tick:
evaluate every open position, close the ones the pipeline closes, merge
trailing updates into the rest, and gate new entries through the risk gate.
It performs no I/O; fills, persistence and scheduling stay with the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from leverguard.config.settings import (
    RiskLimits,
    TradingConfig,
    load_risk_limits,
    load_trading_config,
)
from leverguard.infrastructure.logging.context import new_tick_id, use_context
from leverguard.infrastructure.logging.events import log_engine_warning
from leverguard.position_management.closer import close_position
from leverguard.position_management.exit_pipeline import update_position
from leverguard.position_management.factory import create_position
from leverguard.position_management.models import (
    Position,
    PositionSide,
    PositionUpdate,
    StrategyMode,
)
from leverguard.position_management.mutations import apply_mutations
from leverguard.risk.risk_gate import RiskGateResult, check_risk_gate

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Positions after one tick, split by status, plus each pipeline decision."""

    open_positions: list[Position] = field(default_factory=list)
    closed_positions: list[Position] = field(default_factory=list)
    decisions: dict[str, PositionUpdate] = field(default_factory=dict)


@dataclass
class OpenAttempt:
    """Outcome of ``PositionMonitor.try_open``."""

    opened: bool
    position: Position | None = None
    reason: str | None = None
    gate: RiskGateResult | None = None


class PositionMonitor:
    """Drives exit evaluation and entry gating for a set of positions."""

    def __init__(
        self,
        config: TradingConfig | None = None,
        limits: RiskLimits | None = None,
    ):
        self.config = config or load_trading_config()
        self.limits = limits or load_risk_limits()

    def process_tick(
        self,
        positions: Iterable[Position],
        current_price: float,
        now: datetime | None = None,
        override_max_hold_seconds: float | None = None,
    ) -> TickResult:
        """Evaluate every open position at ``current_price``.

        Positions the pipeline closes are closed at the decision's exit price
        after their trailing updates are merged, so the closed record keeps
        its peak state. A position whose evaluation is rejected is kept open
        unchanged and a warning is logged. Closed positions in the input are
        ignored.
        """
        now = now or datetime.now(timezone.utc)
        result = TickResult()

        with use_context(tick_id=new_tick_id()):
            for position in positions:
                if not position.is_open:
                    continue
                with use_context(position_id=position.id):
                    try:
                        update = update_position(
                            position,
                            current_price,
                            override_max_hold_seconds,
                            now=now,
                            config=self.config,
                        )
                    except ValueError as exc:
                        log_engine_warning(
                            f"Skipping evaluation of {position.id}: {exc}",
                            error=str(exc),
                        )
                        result.open_positions.append(position)
                        continue

                    result.decisions[position.id] = update
                    updated = apply_mutations(position, update.mutations)
                    if update.should_close:
                        result.closed_positions.append(
                            close_position(
                                updated,
                                update.exit_price,
                                update.reason,
                                now=now,
                                config=self.config,
                            )
                        )
                    else:
                        result.open_positions.append(updated)

        if result.closed_positions:
            logger.info(
                "Tick closed %d position(s), %d still open",
                len(result.closed_positions),
                len(result.open_positions),
            )
        return result

    def try_open(
        self,
        side: PositionSide | str,
        entry_price: float,
        collateral: float,
        mode: StrategyMode | str,
        history: Sequence[Position],
        balance: float,
        now: datetime | None = None,
    ) -> OpenAttempt:
        """Open a position if the slot limit and the risk gate allow it.

        Args:
            side: LONG or SHORT.
            entry_price: Fill price.
            collateral: Margin in USD.
            mode: Strategy mode.
            history: Recent positions, open and closed.
            balance: Current account balance in USD.
            now: Entry time (defaults to now, UTC).

        Returns:
            OpenAttempt with the new position, or the refusal reason.
        """
        now = now or datetime.now(timezone.utc)

        open_count = sum(1 for p in history if p.is_open)
        if open_count >= self.config.max_open_positions:
            reason = f"Position limit: {open_count}/{self.config.max_open_positions} open"
            logger.info("Entry skipped: %s", reason)
            return OpenAttempt(opened=False, reason=reason)

        gate = check_risk_gate(history, balance, now=now, limits=self.limits)
        if not gate.allowed:
            return OpenAttempt(opened=False, reason=gate.reason, gate=gate)

        position = create_position(
            side,
            entry_price,
            collateral,
            mode,
            config=self.config,
            entry_time=now,
        )
        return OpenAttempt(opened=True, position=position, gate=gate)


__all__ = ["OpenAttempt", "PositionMonitor", "TickResult"]
