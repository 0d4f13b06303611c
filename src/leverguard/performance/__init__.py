# __init__.py for performance package
from .ledger_stats import LedgerStats, ReasonBreakdown, summarize_trades, trades_frame

__all__ = ["LedgerStats", "ReasonBreakdown", "summarize_trades", "trades_frame"]
