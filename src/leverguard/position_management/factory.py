"""Position factory.

Builds a fresh open ``Position`` whose initial stop can never, on its own,
lose more than the absolute dollar loss cap.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone

from leverguard.config.settings import TradingConfig, load_trading_config
from leverguard.infrastructure.logging.events import log_position_event
from leverguard.position_management.models import (
    Position,
    PositionSide,
    PositionStatus,
    StrategyMode,
)
from leverguard.position_management.validation import validate_positive


def capped_stop_pct(configured_stop_pct: float, notional: float, max_loss_dollars: float) -> float:
    """Tighter of the configured stop and the stop that loses exactly the cap."""
    max_loss_pct = max_loss_dollars / notional * 100.0
    return min(configured_stop_pct, max_loss_pct)


def generate_position_id(mode: StrategyMode, now: datetime) -> str:
    return f"{mode.value}-{int(now.timestamp() * 1000)}-{secrets.token_hex(2)}"


def create_position(
    side: PositionSide | str,
    entry_price: float,
    collateral: float,
    mode: StrategyMode | str = StrategyMode.SWING,
    *,
    config: TradingConfig | None = None,
    entry_time: datetime | None = None,
    position_id: str | None = None,
) -> Position:
    """Open a new position.

    Args:
        side: LONG or SHORT.
        entry_price: Fill price (> 0).
        collateral: Margin in USD (> 0).
        mode: Strategy mode selecting the stop/target percentages.
        config: Trading configuration (defaults to the loaded configuration).
        entry_time: Entry timestamp (defaults to now, UTC).
        position_id: Explicit identifier (generated when omitted).

    Returns:
        A new open Position with stop/target levels and inactive trailing state.

    Raises:
        ValueError: If a price, collateral or leverage is not positive, or the
            side/mode is unknown.
    """
    cfg = config or load_trading_config()
    side = side if isinstance(side, PositionSide) else PositionSide.from_string(side)
    mode = mode if isinstance(mode, StrategyMode) else StrategyMode(str(mode).lower())
    entry_price = validate_positive(entry_price, "entry_price")
    collateral = validate_positive(collateral, "collateral")
    leverage = validate_positive(cfg.leverage, "leverage")

    notional = collateral * leverage
    stop_pct = capped_stop_pct(
        cfg.stop_pct_for(mode), notional, cfg.exits.absolute_max_loss_dollars
    ) / 100.0
    target_pct = cfg.target_pct_for(mode) / 100.0

    if side is PositionSide.LONG:
        stop_loss = entry_price * (1 - stop_pct)
        take_profit = entry_price * (1 + target_pct)
    else:
        stop_loss = entry_price * (1 + stop_pct)
        take_profit = entry_price * (1 - target_pct)

    opened_at = entry_time or datetime.now(timezone.utc)
    position = Position(
        id=position_id or generate_position_id(mode, opened_at),
        side=side,
        entry_price=entry_price,
        entry_time=opened_at,
        collateral=collateral,
        leverage=leverage,
        mode=mode,
        stop_loss=stop_loss,
        take_profit=take_profit,
        min_profit_target=cfg.min_profit_dollars,
        max_profit_target=cfg.max_profit_dollars,
        peak_gross_pnl=0.0,
        peak_price=entry_price,
        breakeven_stop_active=False,
        trailing_stop_active=False,
        trailing_stop_price=None,
        status=PositionStatus.OPEN,
    )

    log_position_event(
        f"Opened {side.value} {mode.value} position at {entry_price:.4f}",
        position_id=position.id,
        notional=notional,
        stop_loss=stop_loss,
        take_profit=take_profit,
    )
    return position


__all__ = ["capped_stop_pct", "create_position", "generate_position_id"]
