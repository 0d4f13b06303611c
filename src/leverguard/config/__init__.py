"""
Configuration management for leverguard
"""

from .config_manager import ConfigManager, get_config, set_config
from .settings import (
    ExitThresholds,
    FeeSettings,
    RiskLimits,
    TradingConfig,
    load_risk_limits,
    load_trading_config,
)

__all__ = [
    "ConfigManager",
    "get_config",
    "set_config",
    "ExitThresholds",
    "FeeSettings",
    "RiskLimits",
    "TradingConfig",
    "load_risk_limits",
    "load_trading_config",
]
