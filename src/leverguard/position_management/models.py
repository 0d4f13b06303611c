"""Position models shared by the factory, exit pipeline, closer and risk gate.

``Position`` is the single explicit ledger schema for one leveraged trade.
The exit pipeline never modifies a ``Position``; it describes the change as
a ``PositionMutations`` delta that the caller merges with
``apply_mutations``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any

from leverguard.config.constants import POSITION_SCHEMA_VERSION


class PositionSide(str, Enum):
    """Side of a leveraged position."""

    LONG = "long"
    SHORT = "short"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> PositionSide:
        """Create a PositionSide from a string value ('long'/'Long'/'SHORT').

        Raises:
            ValueError: If value is not a valid side.
        """
        value_lower = str(value).lower()
        if value_lower == "long":
            return cls.LONG
        if value_lower == "short":
            return cls.SHORT
        raise ValueError(f"Invalid position side: {value}")

    @property
    def sign(self) -> int:
        """+1 for long, -1 for short."""
        return 1 if self is PositionSide.LONG else -1


class StrategyMode(str, Enum):
    """Entry mode the position was opened under; selects stop/target config."""

    MOMENTUM = "momentum"
    MEAN_REVERSION = "mean_reversion"
    SWING = "swing"

    def __str__(self) -> str:
        return self.value


class PositionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value


class ExitReason(str, Enum):
    """Why a position was closed."""

    CIRCUIT_BREAKER_TIME = "circuit-breaker-time"
    CIRCUIT_BREAKER_LOSS = "circuit-breaker-loss"
    STOP_LOSS = "stop-loss"
    TRAILING_STOP = "trailing-stop"
    MAX_PROFIT = "max-profit"
    TAKE_PROFIT = "take-profit"
    SWING_PROFIT = "swing-profit"
    GENEROUS_EXIT = "generous-exit"
    CAPITAL_FREE = "capital-free"
    TIME_DECAY_EXIT = "time-decay-exit"
    THESIS_WRONG = "thesis-wrong"
    TREND_FAILED = "trend-failed"
    TIMEOUT_GREEN = "timeout-green"
    TIMEOUT_RED = "timeout-red"
    MANUAL = "manual"

    def __str__(self) -> str:
        return self.value


def _to_enum(enum_cls: type[Enum], value: Any) -> Any:
    if isinstance(value, enum_cls):
        return value
    if enum_cls is PositionSide:
        return PositionSide.from_string(value)
    try:
        return enum_cls(str(value).lower())
    except ValueError as exc:
        raise ValueError(f"Invalid {enum_cls.__name__}: {value}") from exc


@dataclass
class Position:
    """One open or closed leveraged trade.

    Attributes:
        id: Opaque unique identifier assigned at creation.
        side: LONG or SHORT.
        entry_price: Fill price at entry (> 0).
        entry_time: Entry timestamp.
        collateral: Margin committed in USD (> 0).
        leverage: Leverage multiplier (> 0).
        mode: Strategy mode the position was opened under.
        stop_loss: Static stop price set at creation.
        take_profit: Target price set at creation.
        min_profit_target: Net USD profit accepted by the graduated exits.
        max_profit_target: Net USD profit that closes the position outright.
        peak_gross_pnl: Best gross USD P&L observed while open.
        peak_price: Price at which ``peak_gross_pnl`` was observed.
        breakeven_stop_active: Stop moved to entry plus fee buffer.
        trailing_stop_active: Stop trails the peak price.
        trailing_stop_price: Current breakeven/trailing stop level.
        status: OPEN until closed exactly once.
        exit_price, exit_time, pnl, fees, gross_pnl, reason: Set on close.
    """

    id: str
    side: PositionSide
    entry_price: float
    entry_time: datetime
    collateral: float
    leverage: float
    mode: StrategyMode
    stop_loss: float
    take_profit: float
    min_profit_target: float
    max_profit_target: float
    peak_gross_pnl: float = 0.0
    peak_price: float | None = None
    breakeven_stop_active: bool = False
    trailing_stop_active: bool = False
    trailing_stop_price: float | None = None
    status: PositionStatus = PositionStatus.OPEN
    exit_price: float | None = None
    exit_time: datetime | None = None
    pnl: float | None = None
    fees: float | None = None
    gross_pnl: float | None = None
    reason: ExitReason | None = None

    def __post_init__(self) -> None:
        self.side = _to_enum(PositionSide, self.side)
        self.mode = _to_enum(StrategyMode, self.mode)
        self.status = _to_enum(PositionStatus, self.status)
        if self.reason is not None:
            self.reason = _to_enum(ExitReason, self.reason)
        if self.peak_price is None:
            self.peak_price = self.entry_price

    @property
    def notional(self) -> float:
        """Effective position size in USD (collateral x leverage)."""
        return self.collateral * self.leverage

    @property
    def is_open(self) -> bool:
        return self.status is PositionStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status is PositionStatus.CLOSED

    def is_long(self) -> bool:
        return self.side is PositionSide.LONG

    def is_short(self) -> bool:
        return self.side is PositionSide.SHORT

    def hold_seconds(self, until: datetime | None = None) -> float | None:
        """Seconds between entry and ``until`` (defaults to the exit time)."""
        end = until or self.exit_time
        if end is None:
            return None
        return (end - self.entry_time).total_seconds()

    # ------------------------------------------------------------------
    # Ledger schema
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict tagged with the schema version."""
        data = asdict(self)
        for key in ("side", "mode", "status", "reason"):
            if data[key] is not None:
                data[key] = data[key].value
        for key in ("entry_time", "exit_time"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        data["schema_version"] = POSITION_SCHEMA_VERSION
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        """Rebuild a Position from ``to_dict`` output.

        Raises:
            ValueError: On an unknown schema version or a missing required field.
        """
        version = data.get("schema_version", POSITION_SCHEMA_VERSION)
        if version != POSITION_SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported position schema version {version} "
                f"(expected {POSITION_SCHEMA_VERSION})"
            )
        known = {f.name for f in fields(cls)}
        payload = {k: v for k, v in data.items() if k in known}
        for key in ("entry_time", "exit_time"):
            if isinstance(payload.get(key), str):
                payload[key] = datetime.fromisoformat(payload[key])
        try:
            return cls(**payload)
        except TypeError as exc:
            raise ValueError(f"Invalid position record: {exc}") from exc


@dataclass(frozen=True)
class PositionMutations:
    """Partial update produced by the exit pipeline.

    Only the trailing-stop state is ever mutated while a position is open.
    A field left as ``None`` means "unchanged".
    """

    peak_gross_pnl: float | None = None
    peak_price: float | None = None
    breakeven_stop_active: bool | None = None
    trailing_stop_active: bool | None = None
    trailing_stop_price: float | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields that carry a change."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()

    def __bool__(self) -> bool:
        return not self.is_empty()


@dataclass(frozen=True)
class PositionUpdate:
    """Outcome of one exit-pipeline evaluation.

    Exactly one of:
      - hold: ``should_close`` False, ``mutations`` None
      - hold with trailing updates: ``should_close`` False, ``mutations`` set
      - close: ``should_close`` True with ``reason`` and ``exit_price``
        (``mutations`` set when trailing state changed on the same tick)
    """

    should_close: bool
    reason: ExitReason | None = None
    exit_price: float | None = None
    mutations: PositionMutations | None = None
    detail: str | None = None


__all__ = [
    "ExitReason",
    "Position",
    "PositionMutations",
    "PositionSide",
    "PositionStatus",
    "PositionUpdate",
    "StrategyMode",
]
