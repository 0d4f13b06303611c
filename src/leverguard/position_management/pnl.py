"""Fee and P&L arithmetic shared by the exit pipeline and the position closer.

Keeping one implementation guarantees the pipeline and the closer agree on
every number they compare against the loss cap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from leverguard.position_management.models import PositionSide

if TYPE_CHECKING:
    from leverguard.config.settings import FeeSettings
    from leverguard.position_management.models import Position


@dataclass(frozen=True)
class PnlSnapshot:
    """P&L of a position marked at one price.

    Attributes:
        gross_pnl_pct: Side-aware price move in percent (0.5 = +0.5%).
        gross_pnl_dollars: Price-move P&L on the full notional, before fees.
        fees: Round-trip fees in USD.
    """

    gross_pnl_pct: float
    gross_pnl_dollars: float
    fees: float

    @property
    def net_pnl(self) -> float:
        return self.gross_pnl_dollars - self.fees


def round_trip_fees(notional: float, fees: FeeSettings) -> float:
    """Entry plus exit fee for ``notional`` at the configured fee mode."""
    return notional * (fees.fee_rate_pct / 100.0) * 2


def gross_pnl_percent(entry_price: float, current_price: float, side: PositionSide) -> float:
    """Side-aware percentage move from entry (positive = favorable)."""
    if entry_price <= 0:
        raise ValueError(f"Entry price must be positive, got {entry_price}")
    move = (current_price - entry_price) * 100.0 / entry_price
    return move if side is PositionSide.LONG else -move


def calculate_pnl(position: Position, price: float, fees: FeeSettings) -> PnlSnapshot:
    """Mark ``position`` at ``price``."""
    pct = gross_pnl_percent(position.entry_price, price, position.side)
    notional = position.notional
    return PnlSnapshot(
        gross_pnl_pct=pct,
        gross_pnl_dollars=pct * notional / 100.0,
        fees=round_trip_fees(notional, fees),
    )


__all__ = ["PnlSnapshot", "calculate_pnl", "gross_pnl_percent", "round_trip_fees"]
