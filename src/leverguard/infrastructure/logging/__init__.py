from .config import configure_logging
from .context import (
    clear_context,
    get_context,
    new_tick_id,
    set_context,
    use_context,
)
from .events import (
    log_engine_warning,
    log_exit_event,
    log_position_event,
    log_risk_event,
)

__all__ = [
    "configure_logging",
    "clear_context",
    "get_context",
    "new_tick_id",
    "set_context",
    "use_context",
    "log_engine_warning",
    "log_exit_event",
    "log_position_event",
    "log_risk_event",
]
