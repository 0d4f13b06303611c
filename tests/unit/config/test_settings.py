"""Tests for validated configuration bundles."""

from unittest.mock import MagicMock

import pytest

from leverguard.config import (
    ConfigManager,
    ExitThresholds,
    FeeSettings,
    RiskLimits,
    TradingConfig,
    load_risk_limits,
    load_trading_config,
)
from leverguard.config.providers import DotEnvProvider, EnvVarProvider
from leverguard.position_management import StrategyMode

pytestmark = pytest.mark.unit


class TestDefaults:
    def test_trading_defaults(self):
        config = TradingConfig()
        assert config.leverage == 10
        assert config.stop_pct_for(StrategyMode.SWING) == 4.95
        assert config.target_pct_for("momentum") == 3.43
        assert config.stop_pct_for("mean_reversion") == 0.30
        assert config.target_pct_for(StrategyMode.MEAN_REVERSION) == 0.20
        assert config.max_open_positions == 1
        assert config.fees.fee_rate_pct == 0.03

    def test_exit_threshold_defaults(self):
        exits = ExitThresholds()
        assert exits.absolute_max_hold_seconds == 3600
        assert exits.absolute_max_loss_dollars == 25
        assert exits.breakeven_buffer_pct == 0.06
        assert exits.trailing_distance_pct == 0.30

    def test_risk_defaults(self):
        limits = RiskLimits()
        assert limits.initial_balance == 2000
        assert limits.max_consecutive_losses == 4
        assert limits.min_balance_fraction == 0.5


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"taker_fee_pct": -0.01},
            {"fee_mode": "vip"},
        ],
    )
    def test_fee_settings(self, kwargs):
        with pytest.raises(ValueError):
            FeeSettings(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"absolute_max_hold_seconds": 0},
            {"absolute_max_loss_dollars": -1},
            {"trailing_distance_pct": 0},
            {"breakeven_buffer_pct": -0.1},
            {"capital_free_seconds": 3000},
        ],
    )
    def test_exit_thresholds(self, kwargs):
        with pytest.raises(ValueError):
            ExitThresholds(**kwargs)

    def test_trading_config_requires_every_mode(self):
        with pytest.raises(ValueError, match="missing modes"):
            TradingConfig(stop_loss_pct={"swing": 1.0})

    def test_trading_config_profit_bounds(self):
        with pytest.raises(ValueError, match="min_profit_dollars"):
            TradingConfig(min_profit_dollars=50, max_profit_dollars=10)

    def test_unknown_mode_lookup(self):
        with pytest.raises(ValueError, match="Invalid strategy mode"):
            TradingConfig().stop_pct_for("scalp")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"initial_balance": 0},
            {"max_trades_per_hour": 0},
            {"min_balance_fraction": 1.5},
        ],
    )
    def test_risk_limits(self, kwargs):
        with pytest.raises(ValueError):
            RiskLimits(**kwargs)


class TestLoaders:
    def test_load_trading_config_from_environment(self, monkeypatch):
        monkeypatch.setenv("LEVERGUARD_LEVERAGE", "20")
        monkeypatch.setenv("LEVERGUARD_MR_STOP_LOSS_PCT", "0.4")
        monkeypatch.setenv("LEVERGUARD_FEE_MODE", "MAKER")
        monkeypatch.setenv("LEVERGUARD_MAX_LOSS_DOLLARS", "40")

        config = load_trading_config()

        assert config.leverage == 20
        assert config.stop_pct_for("mean_reversion") == 0.4
        assert config.stop_pct_for("swing") == 4.95
        assert config.fees.fee_mode == "maker"
        assert config.exits.absolute_max_loss_dollars == 40

    def test_load_trading_config_from_dotenv(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LEVERGUARD_TRAILING_DISTANCE_PCT=0.5\nLEVERGUARD_MAX_OPEN_POSITIONS=2\n")
        manager = ConfigManager(providers=[EnvVarProvider(), DotEnvProvider(str(env_file))])

        config = load_trading_config(manager)

        assert config.exits.trailing_distance_pct == 0.5
        assert config.max_open_positions == 2

    def test_load_risk_limits(self):
        manager = MagicMock()
        manager.get_float.side_effect = lambda key, default: (
            3000.0 if key == "LEVERGUARD_INITIAL_BALANCE" else default
        )
        manager.get_int.side_effect = lambda key, default: (
            3 if key == "LEVERGUARD_MAX_CONSECUTIVE_LOSSES" else default
        )

        limits = load_risk_limits(manager)

        assert limits.initial_balance == 3000.0
        assert limits.max_consecutive_losses == 3
        assert limits.max_trades_per_hour == 2

    def test_invalid_loaded_values_raise(self, monkeypatch):
        monkeypatch.setenv("LEVERGUARD_LEVERAGE", "-3")
        with pytest.raises(ValueError, match="leverage"):
            load_trading_config()
