from .position_monitor import OpenAttempt, PositionMonitor, TickResult

__all__ = ["OpenAttempt", "PositionMonitor", "TickResult"]
