"""Trade ledger summary statistics.

Pure functions over closed positions. Dollar amounts are net of fees unless
stated otherwise; ``win_rate`` is a percentage (55.0 = 55 %).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pandas as pd

from leverguard.config.constants import DAILY_LOSS_WINDOW_SECONDS
from leverguard.position_management.models import Position

_COLUMNS = ["reason", "pnl", "fees", "hold_seconds", "daily"]


@dataclass(frozen=True)
class ReasonBreakdown:
    count: int
    pnl: float


@dataclass(frozen=True)
class LedgerStats:
    """Aggregate view of a trade ledger."""

    total_trades: int = 0
    daily_trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    daily_pnl: float = 0.0
    total_pnl: float = 0.0
    total_fees: float = 0.0
    avg_hold_seconds: float = 0.0
    by_reason: dict[str, ReasonBreakdown] = field(default_factory=dict)


def trades_frame(positions: Iterable[Position], now: datetime | None = None) -> pd.DataFrame:
    """One row per closed position; open positions are dropped."""
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(seconds=DAILY_LOSS_WINDOW_SECONDS)
    rows = [
        {
            "reason": p.reason.value if p.reason is not None else "unknown",
            "pnl": p.pnl or 0.0,
            "fees": p.fees or 0.0,
            "hold_seconds": p.hold_seconds(),
            "daily": p.exit_time >= since,
        }
        for p in positions
        if p.is_closed and p.exit_time is not None
    ]
    return pd.DataFrame(rows, columns=_COLUMNS)


def summarize_trades(positions: Iterable[Position], now: datetime | None = None) -> LedgerStats:
    """Summarize closed trades.

    Args:
        positions: Ledger positions; open ones are ignored.
        now: Reference time for the trailing 24h window (defaults to now, UTC).

    Returns:
        LedgerStats; all zeros for an empty ledger.
    """
    df = trades_frame(positions, now)
    if df.empty:
        return LedgerStats()

    total = len(df)
    wins = int((df["pnl"] > 0).sum())
    losses = int((df["pnl"] < 0).sum())
    daily = df[df["daily"]]

    grouped = df.groupby("reason")["pnl"].agg(["count", "sum"])
    by_reason = {
        str(reason): ReasonBreakdown(count=int(row["count"]), pnl=float(row["sum"]))
        for reason, row in grouped.iterrows()
    }

    return LedgerStats(
        total_trades=total,
        daily_trades=len(daily),
        wins=wins,
        losses=losses,
        win_rate=wins / total * 100.0,
        daily_pnl=float(daily["pnl"].sum()),
        total_pnl=float(df["pnl"].sum()),
        total_fees=float(df["fees"].sum()),
        avg_hold_seconds=float(df["hold_seconds"].mean()),
        by_reason=by_reason,
    )


__all__ = ["LedgerStats", "ReasonBreakdown", "summarize_trades", "trades_frame"]
