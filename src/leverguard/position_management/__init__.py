"""Position lifecycle: creation, exit evaluation, trailing stops and closing."""

from .closer import close_position
from .exit_pipeline import update_position
from .factory import create_position
from .models import (
    ExitReason,
    Position,
    PositionMutations,
    PositionSide,
    PositionStatus,
    PositionUpdate,
    StrategyMode,
)
from .mutations import apply_mutations
from .trailing_stops import TrailingStopPolicy

__all__ = [
    "ExitReason",
    "Position",
    "PositionMutations",
    "PositionSide",
    "PositionStatus",
    "PositionUpdate",
    "StrategyMode",
    "TrailingStopPolicy",
    "apply_mutations",
    "close_position",
    "create_position",
    "update_position",
]
