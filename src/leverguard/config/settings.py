"""Validated configuration bundles consumed by the position core.

Each bundle is a plain dataclass with sensible defaults taken from
``leverguard.config.constants``. ``load_trading_config`` and
``load_risk_limits`` overlay values resolved through ``ConfigManager``
(environment variables, then ``.env``) on top of those defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from leverguard.config.config_manager import ConfigManager, get_config
from leverguard.config.constants import (
    DEFAULT_ABSOLUTE_MAX_HOLD_SECONDS,
    DEFAULT_ABSOLUTE_MAX_LOSS_DOLLARS,
    DEFAULT_BREAKEVEN_ACTIVATION_PCT,
    DEFAULT_BREAKEVEN_BUFFER_PCT,
    DEFAULT_CAPITAL_FREE_MAX_LOSS_DOLLARS,
    DEFAULT_CAPITAL_FREE_SECONDS,
    DEFAULT_FEE_MODE,
    DEFAULT_GENEROUS_PROFIT_SECONDS,
    DEFAULT_INITIAL_BALANCE,
    DEFAULT_LEVERAGE,
    DEFAULT_MAKER_FEE_PCT,
    DEFAULT_MAX_CONSECUTIVE_LOSSES,
    DEFAULT_MAX_DAILY_LOSS_DOLLARS,
    DEFAULT_MAX_DAILY_LOSS_PERCENT,
    DEFAULT_MAX_OPEN_POSITIONS,
    DEFAULT_MAX_PROFIT_DOLLARS,
    DEFAULT_MAX_TRADE_SECONDS,
    DEFAULT_MAX_TRADES_PER_HOUR,
    DEFAULT_MIN_BALANCE_FRACTION,
    DEFAULT_MIN_PROFIT_DOLLARS,
    DEFAULT_MR_STOP_LOSS_PCT,
    DEFAULT_MR_TAKE_PROFIT_PCT,
    DEFAULT_PAUSE_AFTER_LOSSES_MINUTES,
    DEFAULT_STOP_LOSS_PCT,
    DEFAULT_SWING_MIN_HOLD_SECONDS,
    DEFAULT_SWING_PROFIT_SCALE_SECONDS,
    DEFAULT_TAKE_PROFIT_PCT,
    DEFAULT_TAKER_FEE_PCT,
    DEFAULT_THESIS_WRONG_PCT,
    DEFAULT_THESIS_WRONG_SECONDS,
    DEFAULT_TIME_DECAY_MAX_LOSS_DOLLARS,
    DEFAULT_TIME_DECAY_SECONDS,
    DEFAULT_TRAILING_ACTIVATION_PCT,
    DEFAULT_TRAILING_DISTANCE_PCT,
    DEFAULT_TREND_FAILED_DOLLARS,
    DEFAULT_TREND_FAILED_SECONDS,
    FEE_MODE_MAKER,
    FEE_MODE_TAKER,
)

CONFIG_PREFIX = "LEVERGUARD_"

_MODES = ("momentum", "mean_reversion", "swing")


def _mode_key(mode: Any) -> str:
    key = str(getattr(mode, "value", mode)).lower()
    if key not in _MODES:
        raise ValueError(f"Invalid strategy mode: {mode}")
    return key


@dataclass(frozen=True)
class FeeSettings:
    """Exchange fee schedule. Rates are percent per side (0.03 = 0.03%)."""

    taker_fee_pct: float = DEFAULT_TAKER_FEE_PCT
    maker_fee_pct: float = DEFAULT_MAKER_FEE_PCT
    fee_mode: str = DEFAULT_FEE_MODE

    def __post_init__(self) -> None:
        if self.taker_fee_pct < 0 or self.maker_fee_pct < 0:
            raise ValueError("fee rates must be non-negative")
        if self.fee_mode not in (FEE_MODE_TAKER, FEE_MODE_MAKER):
            raise ValueError(f"fee_mode must be 'taker' or 'maker', got '{self.fee_mode}'")

    @property
    def fee_rate_pct(self) -> float:
        """Per-side fee rate for the configured fee mode."""
        return self.taker_fee_pct if self.fee_mode == FEE_MODE_TAKER else self.maker_fee_pct


@dataclass(frozen=True)
class ExitThresholds:
    """Hard limits and thresholds of the exit evaluation pipeline."""

    absolute_max_hold_seconds: float = DEFAULT_ABSOLUTE_MAX_HOLD_SECONDS
    absolute_max_loss_dollars: float = DEFAULT_ABSOLUTE_MAX_LOSS_DOLLARS
    breakeven_activation_pct: float = DEFAULT_BREAKEVEN_ACTIVATION_PCT
    breakeven_buffer_pct: float = DEFAULT_BREAKEVEN_BUFFER_PCT
    trailing_activation_pct: float = DEFAULT_TRAILING_ACTIVATION_PCT
    trailing_distance_pct: float = DEFAULT_TRAILING_DISTANCE_PCT
    swing_min_hold_seconds: float = DEFAULT_SWING_MIN_HOLD_SECONDS
    swing_profit_scale_seconds: float = DEFAULT_SWING_PROFIT_SCALE_SECONDS
    generous_profit_seconds: float = DEFAULT_GENEROUS_PROFIT_SECONDS
    capital_free_seconds: float = DEFAULT_CAPITAL_FREE_SECONDS
    capital_free_max_loss_dollars: float = DEFAULT_CAPITAL_FREE_MAX_LOSS_DOLLARS
    time_decay_seconds: float = DEFAULT_TIME_DECAY_SECONDS
    time_decay_max_loss_dollars: float = DEFAULT_TIME_DECAY_MAX_LOSS_DOLLARS
    thesis_wrong_seconds: float = DEFAULT_THESIS_WRONG_SECONDS
    thesis_wrong_pct: float = DEFAULT_THESIS_WRONG_PCT
    trend_failed_seconds: float = DEFAULT_TREND_FAILED_SECONDS
    trend_failed_dollars: float = DEFAULT_TREND_FAILED_DOLLARS

    def __post_init__(self) -> None:
        if self.absolute_max_hold_seconds <= 0:
            raise ValueError("absolute_max_hold_seconds must be positive")
        if self.absolute_max_loss_dollars <= 0:
            raise ValueError("absolute_max_loss_dollars must be positive")
        if self.trailing_distance_pct <= 0 or self.trailing_distance_pct >= 100:
            raise ValueError("trailing_distance_pct must be between 0 and 100")
        if self.breakeven_buffer_pct < 0:
            raise ValueError("breakeven_buffer_pct must be non-negative")
        if self.breakeven_activation_pct <= 0 or self.trailing_activation_pct <= 0:
            raise ValueError("activation thresholds must be positive")

        # Graduated exits must be checked in ascending time order
        ladder = (
            self.swing_profit_scale_seconds,
            self.generous_profit_seconds,
            self.capital_free_seconds,
            self.time_decay_seconds,
        )
        if list(ladder) != sorted(ladder):
            raise ValueError("graduated exit thresholds must be in ascending order")


@dataclass(frozen=True)
class TradingConfig:
    """Everything the factory, pipeline and closer need.

    Stop and target percentages are keyed by strategy mode value.
    """

    leverage: float = DEFAULT_LEVERAGE
    stop_loss_pct: dict[str, float] = field(
        default_factory=lambda: {
            "momentum": DEFAULT_STOP_LOSS_PCT,
            "mean_reversion": DEFAULT_MR_STOP_LOSS_PCT,
            "swing": DEFAULT_STOP_LOSS_PCT,
        }
    )
    take_profit_pct: dict[str, float] = field(
        default_factory=lambda: {
            "momentum": DEFAULT_TAKE_PROFIT_PCT,
            "mean_reversion": DEFAULT_MR_TAKE_PROFIT_PCT,
            "swing": DEFAULT_TAKE_PROFIT_PCT,
        }
    )
    min_profit_dollars: float = DEFAULT_MIN_PROFIT_DOLLARS
    max_profit_dollars: float = DEFAULT_MAX_PROFIT_DOLLARS
    max_trade_seconds: float = DEFAULT_MAX_TRADE_SECONDS
    max_open_positions: int = DEFAULT_MAX_OPEN_POSITIONS
    fees: FeeSettings = field(default_factory=FeeSettings)
    exits: ExitThresholds = field(default_factory=ExitThresholds)

    def __post_init__(self) -> None:
        if self.leverage <= 0:
            raise ValueError("leverage must be positive")
        for label, table in (("stop_loss_pct", self.stop_loss_pct), ("take_profit_pct", self.take_profit_pct)):
            missing = [m for m in _MODES if m not in table]
            if missing:
                raise ValueError(f"{label} missing modes: {missing}")
            if any(v <= 0 for v in table.values()):
                raise ValueError(f"{label} values must be positive")
        if self.max_trade_seconds <= 0:
            raise ValueError("max_trade_seconds must be positive")
        if self.max_open_positions < 1:
            raise ValueError("max_open_positions must be at least 1")
        if self.min_profit_dollars > self.max_profit_dollars:
            raise ValueError("min_profit_dollars cannot be greater than max_profit_dollars")

    def stop_pct_for(self, mode: Any) -> float:
        return float(self.stop_loss_pct[_mode_key(mode)])

    def target_pct_for(self, mode: Any) -> float:
        return float(self.take_profit_pct[_mode_key(mode)])


@dataclass(frozen=True)
class RiskLimits:
    """Limits enforced by the pre-trade risk gate."""

    initial_balance: float = DEFAULT_INITIAL_BALANCE
    max_trades_per_hour: int = DEFAULT_MAX_TRADES_PER_HOUR
    max_consecutive_losses: int = DEFAULT_MAX_CONSECUTIVE_LOSSES
    pause_after_losses_minutes: float = DEFAULT_PAUSE_AFTER_LOSSES_MINUTES
    max_daily_loss_dollars: float = DEFAULT_MAX_DAILY_LOSS_DOLLARS
    max_daily_loss_percent: float = DEFAULT_MAX_DAILY_LOSS_PERCENT
    min_balance_fraction: float = DEFAULT_MIN_BALANCE_FRACTION

    def __post_init__(self) -> None:
        if self.initial_balance <= 0:
            raise ValueError("initial_balance must be positive")
        if self.max_trades_per_hour < 1:
            raise ValueError("max_trades_per_hour must be at least 1")
        if self.max_consecutive_losses < 1:
            raise ValueError("max_consecutive_losses must be at least 1")
        if self.pause_after_losses_minutes < 0:
            raise ValueError("pause_after_losses_minutes must be non-negative")
        if self.max_daily_loss_dollars <= 0:
            raise ValueError("max_daily_loss_dollars must be positive")
        if self.max_daily_loss_percent <= 0:
            raise ValueError("max_daily_loss_percent must be positive")
        if not 0 <= self.min_balance_fraction <= 1:
            raise ValueError("min_balance_fraction must be between 0 and 1")


def load_trading_config(manager: ConfigManager | None = None) -> TradingConfig:
    """Build a ``TradingConfig`` from ``LEVERGUARD_*`` configuration keys."""
    cfg = manager or get_config()

    def _f(key: str, default: float) -> float:
        return cfg.get_float(f"{CONFIG_PREFIX}{key}", default)

    stop_pct = _f("STOP_LOSS_PCT", DEFAULT_STOP_LOSS_PCT)
    target_pct = _f("TAKE_PROFIT_PCT", DEFAULT_TAKE_PROFIT_PCT)
    return TradingConfig(
        leverage=_f("LEVERAGE", DEFAULT_LEVERAGE),
        stop_loss_pct={
            "momentum": stop_pct,
            "mean_reversion": _f("MR_STOP_LOSS_PCT", DEFAULT_MR_STOP_LOSS_PCT),
            "swing": stop_pct,
        },
        take_profit_pct={
            "momentum": target_pct,
            "mean_reversion": _f("MR_TAKE_PROFIT_PCT", DEFAULT_MR_TAKE_PROFIT_PCT),
            "swing": target_pct,
        },
        min_profit_dollars=_f("MIN_PROFIT_DOLLARS", DEFAULT_MIN_PROFIT_DOLLARS),
        max_profit_dollars=_f("MAX_PROFIT_DOLLARS", DEFAULT_MAX_PROFIT_DOLLARS),
        max_trade_seconds=_f("MAX_TRADE_SECONDS", DEFAULT_MAX_TRADE_SECONDS),
        max_open_positions=cfg.get_int(
            f"{CONFIG_PREFIX}MAX_OPEN_POSITIONS", DEFAULT_MAX_OPEN_POSITIONS
        ),
        fees=FeeSettings(
            taker_fee_pct=_f("TAKER_FEE_PCT", DEFAULT_TAKER_FEE_PCT),
            maker_fee_pct=_f("MAKER_FEE_PCT", DEFAULT_MAKER_FEE_PCT),
            fee_mode=(cfg.get(f"{CONFIG_PREFIX}FEE_MODE", DEFAULT_FEE_MODE) or DEFAULT_FEE_MODE).lower(),
        ),
        exits=ExitThresholds(
            absolute_max_hold_seconds=_f("MAX_HOLD_SECONDS", DEFAULT_ABSOLUTE_MAX_HOLD_SECONDS),
            absolute_max_loss_dollars=_f("MAX_LOSS_DOLLARS", DEFAULT_ABSOLUTE_MAX_LOSS_DOLLARS),
            breakeven_activation_pct=_f("BREAKEVEN_ACTIVATION_PCT", DEFAULT_BREAKEVEN_ACTIVATION_PCT),
            breakeven_buffer_pct=_f("BREAKEVEN_BUFFER_PCT", DEFAULT_BREAKEVEN_BUFFER_PCT),
            trailing_activation_pct=_f("TRAILING_ACTIVATION_PCT", DEFAULT_TRAILING_ACTIVATION_PCT),
            trailing_distance_pct=_f("TRAILING_DISTANCE_PCT", DEFAULT_TRAILING_DISTANCE_PCT),
        ),
    )


def load_risk_limits(manager: ConfigManager | None = None) -> RiskLimits:
    """Build ``RiskLimits`` from ``LEVERGUARD_*`` configuration keys."""
    cfg = manager or get_config()
    return RiskLimits(
        initial_balance=cfg.get_float(f"{CONFIG_PREFIX}INITIAL_BALANCE", DEFAULT_INITIAL_BALANCE),
        max_trades_per_hour=cfg.get_int(
            f"{CONFIG_PREFIX}MAX_TRADES_PER_HOUR", DEFAULT_MAX_TRADES_PER_HOUR
        ),
        max_consecutive_losses=cfg.get_int(
            f"{CONFIG_PREFIX}MAX_CONSECUTIVE_LOSSES", DEFAULT_MAX_CONSECUTIVE_LOSSES
        ),
        pause_after_losses_minutes=cfg.get_float(
            f"{CONFIG_PREFIX}PAUSE_AFTER_LOSSES_MINUTES", DEFAULT_PAUSE_AFTER_LOSSES_MINUTES
        ),
        max_daily_loss_dollars=cfg.get_float(
            f"{CONFIG_PREFIX}MAX_DAILY_LOSS_DOLLARS", DEFAULT_MAX_DAILY_LOSS_DOLLARS
        ),
        max_daily_loss_percent=cfg.get_float(
            f"{CONFIG_PREFIX}MAX_DAILY_LOSS_PERCENT", DEFAULT_MAX_DAILY_LOSS_PERCENT
        ),
        min_balance_fraction=cfg.get_float(
            f"{CONFIG_PREFIX}MIN_BALANCE_FRACTION", DEFAULT_MIN_BALANCE_FRACTION
        ),
    )


__all__ = [
    "CONFIG_PREFIX",
    "ExitThresholds",
    "FeeSettings",
    "RiskLimits",
    "TradingConfig",
    "load_risk_limits",
    "load_trading_config",
]
