"""leverguard: exit evaluation, trailing stops and pre-trade risk gating
for a single leveraged position."""

from leverguard.engine import OpenAttempt, PositionMonitor, TickResult
from leverguard.performance import LedgerStats, summarize_trades
from leverguard.position_management import (
    ExitReason,
    Position,
    PositionMutations,
    PositionSide,
    PositionStatus,
    PositionUpdate,
    StrategyMode,
    apply_mutations,
    close_position,
    create_position,
    update_position,
)
from leverguard.risk import RiskCheck, RiskGateResult, check_risk_gate

__version__ = "0.1.0"

__all__ = [
    "ExitReason",
    "LedgerStats",
    "OpenAttempt",
    "Position",
    "PositionMonitor",
    "PositionMutations",
    "PositionSide",
    "PositionStatus",
    "PositionUpdate",
    "RiskCheck",
    "RiskGateResult",
    "StrategyMode",
    "TickResult",
    "apply_mutations",
    "check_risk_gate",
    "close_position",
    "create_position",
    "summarize_trades",
    "update_position",
]
