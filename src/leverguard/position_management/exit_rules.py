"""Individual exit rules of the evaluation pipeline.

Each rule is a plain function taking an ``ExitContext`` and returning an
``ExitDecision`` when it fires, or ``None`` when it does not. The pipeline
walks ``PRE_TRAILING_RULES``, updates trailing state, then walks
``POST_TRAILING_RULES``; the first decision wins.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from leverguard.config.settings import ExitThresholds
from leverguard.position_management.models import ExitReason, Position, PositionSide
from leverguard.position_management.pnl import PnlSnapshot


@dataclass(frozen=True)
class ExitContext:
    """Everything a rule may look at, computed once per evaluation.

    Attributes:
        position: Position being evaluated, as handed to the pipeline.
        current_price: Mark price.
        elapsed_seconds: Seconds since entry.
        pnl: Gross/fee/net P&L at ``current_price``.
        thresholds: Hard limits and time/P&L thresholds.
        max_hold_seconds: Effective timeout (override or configured,
            never above the absolute hold cap).
    """

    position: Position
    current_price: float
    elapsed_seconds: float
    pnl: PnlSnapshot
    thresholds: ExitThresholds
    max_hold_seconds: float

    @property
    def net_pnl(self) -> float:
        return self.pnl.net_pnl


@dataclass(frozen=True)
class ExitDecision:
    """A rule firing: close at ``exit_price`` for ``reason``."""

    reason: ExitReason
    exit_price: float
    detail: str


ExitRule = Callable[[ExitContext], "ExitDecision | None"]


def _close(ctx: ExitContext, reason: ExitReason, detail: str) -> ExitDecision:
    return ExitDecision(reason=reason, exit_price=ctx.current_price, detail=detail)


def _crossed_against(side: PositionSide, price: float, level: float) -> bool:
    if side is PositionSide.LONG:
        return price <= level
    return price >= level


def _reached_in_favor(side: PositionSide, price: float, level: float) -> bool:
    if side is PositionSide.LONG:
        return price >= level
    return price <= level


# ----------------------------------------------------------------------
# Hard limits
# ----------------------------------------------------------------------


def time_circuit_breaker(ctx: ExitContext) -> ExitDecision | None:
    limit = ctx.thresholds.absolute_max_hold_seconds
    if ctx.elapsed_seconds >= limit:
        return _close(
            ctx,
            ExitReason.CIRCUIT_BREAKER_TIME,
            f"held {ctx.elapsed_seconds:.0f}s >= hard limit {limit:.0f}s",
        )
    return None


def loss_circuit_breaker(ctx: ExitContext) -> ExitDecision | None:
    cap = ctx.thresholds.absolute_max_loss_dollars
    if ctx.net_pnl <= -cap:
        return _close(
            ctx,
            ExitReason.CIRCUIT_BREAKER_LOSS,
            f"net ${ctx.net_pnl:.2f} breached hard loss cap -${cap:.2f}",
        )
    return None


def stop_hit(ctx: ExitContext) -> ExitDecision | None:
    """Static stop, or the breakeven/trailing stop once one has been set."""
    position = ctx.position
    if position.trailing_stop_price is not None:
        level = position.trailing_stop_price
    else:
        level = position.stop_loss
    if not _crossed_against(position.side, ctx.current_price, level):
        return None
    reason = ExitReason.TRAILING_STOP if position.trailing_stop_active else ExitReason.STOP_LOSS
    return _close(ctx, reason, f"price {ctx.current_price:.4f} crossed stop {level:.4f}")


def max_profit(ctx: ExitContext) -> ExitDecision | None:
    target = ctx.position.max_profit_target
    if ctx.net_pnl >= target:
        return _close(ctx, ExitReason.MAX_PROFIT, f"net ${ctx.net_pnl:.2f} >= max ${target:.2f}")
    return None


# ----------------------------------------------------------------------
# Profit taking and graduated exits
# ----------------------------------------------------------------------


def take_profit(ctx: ExitContext) -> ExitDecision | None:
    if ctx.elapsed_seconds < ctx.thresholds.swing_min_hold_seconds:
        return None
    position = ctx.position
    if _reached_in_favor(position.side, ctx.current_price, position.take_profit):
        return _close(
            ctx,
            ExitReason.TAKE_PROFIT,
            f"price {ctx.current_price:.4f} reached target {position.take_profit:.4f}",
        )
    return None


def graduated_exit(ctx: ExitContext) -> ExitDecision | None:
    """Accept progressively worse outcomes the longer the position is held."""
    t = ctx.thresholds
    elapsed = ctx.elapsed_seconds
    net = ctx.net_pnl

    if elapsed >= t.swing_profit_scale_seconds and net >= ctx.position.min_profit_target:
        return _close(ctx, ExitReason.SWING_PROFIT, f"net ${net:.2f} after {elapsed:.0f}s")
    if elapsed >= t.generous_profit_seconds and net >= 0:
        return _close(ctx, ExitReason.GENEROUS_EXIT, f"net ${net:.2f} after {elapsed:.0f}s")
    if elapsed >= t.capital_free_seconds and net >= -t.capital_free_max_loss_dollars:
        return _close(ctx, ExitReason.CAPITAL_FREE, f"net ${net:.2f} after {elapsed:.0f}s")
    if elapsed >= t.time_decay_seconds and net >= -t.time_decay_max_loss_dollars:
        return _close(ctx, ExitReason.TIME_DECAY_EXIT, f"net ${net:.2f} after {elapsed:.0f}s")
    return None


# ----------------------------------------------------------------------
# Invalidation
# ----------------------------------------------------------------------


def thesis_wrong(ctx: ExitContext) -> ExitDecision | None:
    t = ctx.thresholds
    if ctx.elapsed_seconds >= t.thesis_wrong_seconds and ctx.pnl.gross_pnl_pct < t.thesis_wrong_pct:
        return _close(
            ctx,
            ExitReason.THESIS_WRONG,
            f"gross {ctx.pnl.gross_pnl_pct:+.2f}% after {ctx.elapsed_seconds:.0f}s",
        )
    return None


def trend_failed(ctx: ExitContext) -> ExitDecision | None:
    t = ctx.thresholds
    if (
        ctx.elapsed_seconds >= t.trend_failed_seconds
        and ctx.pnl.gross_pnl_dollars < t.trend_failed_dollars
    ):
        return _close(
            ctx,
            ExitReason.TREND_FAILED,
            f"gross ${ctx.pnl.gross_pnl_dollars:.2f} after {ctx.elapsed_seconds:.0f}s",
        )
    return None


def timeout(ctx: ExitContext) -> ExitDecision | None:
    if ctx.elapsed_seconds < ctx.max_hold_seconds:
        return None
    reason = ExitReason.TIMEOUT_GREEN if ctx.net_pnl >= 0 else ExitReason.TIMEOUT_RED
    return _close(
        ctx, reason, f"held {ctx.elapsed_seconds:.0f}s >= max {ctx.max_hold_seconds:.0f}s"
    )


PRE_TRAILING_RULES: tuple[ExitRule, ...] = (
    time_circuit_breaker,
    loss_circuit_breaker,
    stop_hit,
    max_profit,
)

POST_TRAILING_RULES: tuple[ExitRule, ...] = (
    take_profit,
    graduated_exit,
    thesis_wrong,
    trend_failed,
    timeout,
)


def first_decision(rules: tuple[ExitRule, ...], ctx: ExitContext) -> ExitDecision | None:
    """Return the first rule decision in ``rules`` order, if any."""
    for rule in rules:
        decision = rule(ctx)
        if decision is not None:
            return decision
    return None


__all__ = [
    "ExitContext",
    "ExitDecision",
    "ExitRule",
    "POST_TRAILING_RULES",
    "PRE_TRAILING_RULES",
    "first_decision",
    "graduated_exit",
    "loss_circuit_breaker",
    "max_profit",
    "stop_hit",
    "take_profit",
    "thesis_wrong",
    "time_circuit_breaker",
    "timeout",
    "trend_failed",
]
