"""Breakeven and trailing stop state machine.

The state machine works in two phases:
1. Breakeven: once the gross move reaches ``breakeven_activation_pct`` the
   stop moves to entry plus a fixed fee-covering buffer.
2. Trailing: once the gross move reaches ``trailing_activation_pct`` the stop
   trails the best price seen by ``trailing_distance_pct``.

Once trailing is active the stop only ever moves in the position's favor.
The policy reads a position and returns a ``PositionMutations`` delta; it
never modifies the position itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from leverguard.config.constants import (
    DEFAULT_BREAKEVEN_ACTIVATION_PCT,
    DEFAULT_BREAKEVEN_BUFFER_PCT,
    DEFAULT_TRAILING_ACTIVATION_PCT,
    DEFAULT_TRAILING_DISTANCE_PCT,
)
from leverguard.position_management.models import PositionMutations, PositionSide

if TYPE_CHECKING:
    from leverguard.config.settings import ExitThresholds
    from leverguard.position_management.models import Position
    from leverguard.position_management.pnl import PnlSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrailingStopPolicy:
    """Breakeven and trailing stop thresholds.

    Percent inputs are in percent units (0.30 = 0.30%).
    """

    breakeven_activation_pct: float = DEFAULT_BREAKEVEN_ACTIVATION_PCT
    breakeven_buffer_pct: float = DEFAULT_BREAKEVEN_BUFFER_PCT
    trailing_activation_pct: float = DEFAULT_TRAILING_ACTIVATION_PCT
    trailing_distance_pct: float = DEFAULT_TRAILING_DISTANCE_PCT

    @classmethod
    def from_thresholds(cls, thresholds: ExitThresholds) -> TrailingStopPolicy:
        return cls(
            breakeven_activation_pct=thresholds.breakeven_activation_pct,
            breakeven_buffer_pct=thresholds.breakeven_buffer_pct,
            trailing_activation_pct=thresholds.trailing_activation_pct,
            trailing_distance_pct=thresholds.trailing_distance_pct,
        )

    def breakeven_price(self, side: PositionSide, entry_price: float) -> float:
        """Entry price pushed past breakeven by the fee buffer."""
        buffer = self.breakeven_buffer_pct / 100.0
        if side is PositionSide.LONG:
            return entry_price * (1 + buffer)
        return entry_price * (1 - buffer)

    def trail_price(self, side: PositionSide, peak_price: float) -> float:
        """Stop level trailing ``peak_price`` by the configured distance."""
        distance = self.trailing_distance_pct / 100.0
        if side is PositionSide.LONG:
            return peak_price * (1 - distance)
        return peak_price * (1 + distance)

    @staticmethod
    def is_more_favorable(side: PositionSide, candidate: float, current: float | None) -> bool:
        """Whether ``candidate`` is a tighter stop than ``current`` for ``side``."""
        if current is None:
            return True
        if side is PositionSide.LONG:
            return candidate > current
        return candidate < current

    def evaluate(
        self, position: Position, current_price: float, snapshot: PnlSnapshot
    ) -> PositionMutations:
        """Return the trailing state changes implied by ``current_price``.

        - Records a new gross P&L peak (and the peak price when it is a new
          favorable extreme).
        - Arms breakeven once, then full trailing once.
        - Ratchets an active trailing stop from a new peak price, adopting it
          only when it is tighter than the current stop.
        """
        side = position.side
        changes: dict[str, Any] = {}
        new_peak_price: float | None = None

        if snapshot.gross_pnl_dollars > position.peak_gross_pnl:
            changes["peak_gross_pnl"] = snapshot.gross_pnl_dollars
            recorded_peak = position.peak_price if position.peak_price is not None else position.entry_price
            if (side is PositionSide.LONG and current_price > recorded_peak) or (
                side is PositionSide.SHORT and current_price < recorded_peak
            ):
                new_peak_price = current_price
                changes["peak_price"] = current_price

        peak_price = changes.get("peak_price", position.peak_price)
        stop = position.trailing_stop_price

        if (
            not position.breakeven_stop_active
            and snapshot.gross_pnl_pct >= self.breakeven_activation_pct
        ):
            changes["breakeven_stop_active"] = True
            breakeven = self.breakeven_price(side, position.entry_price)
            # An already-active trail is never loosened back to breakeven
            if not position.trailing_stop_active or self.is_more_favorable(side, breakeven, stop):
                stop = breakeven
                changes["trailing_stop_price"] = stop
            logger.info(
                "Breakeven stop armed for %s at %.4f (gross %+.2f%%)",
                position.id,
                stop,
                snapshot.gross_pnl_pct,
            )

        if (
            not position.trailing_stop_active
            and snapshot.gross_pnl_pct >= self.trailing_activation_pct
        ):
            changes["trailing_stop_active"] = True
            candidate = self.trail_price(side, peak_price)
            # A wide trail never drops below an armed breakeven stop
            if self.is_more_favorable(side, candidate, stop):
                stop = candidate
                changes["trailing_stop_price"] = stop
            logger.info(
                "Trailing stop armed for %s at %.4f (%.2f%% behind peak %.4f)",
                position.id,
                stop,
                self.trailing_distance_pct,
                peak_price,
            )

        if position.trailing_stop_active and new_peak_price is not None:
            candidate = self.trail_price(side, new_peak_price)
            if self.is_more_favorable(side, candidate, stop):
                logger.debug(
                    "Trailing stop for %s ratcheted %s -> %.4f",
                    position.id,
                    f"{stop:.4f}" if stop is not None else "none",
                    candidate,
                )
                stop = candidate
                changes["trailing_stop_price"] = stop

        return PositionMutations(**changes)


__all__ = ["TrailingStopPolicy"]
