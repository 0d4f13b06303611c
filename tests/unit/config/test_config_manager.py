"""Tests for the configuration manager and its providers."""

from unittest.mock import MagicMock, patch

import pytest

import leverguard.config.config_manager as config_module
from leverguard.config import ConfigManager, get_config, set_config
from leverguard.config.providers import DotEnvProvider, EnvVarProvider

pytestmark = pytest.mark.unit


def _provider(values=None, available=True, name="mock"):
    provider = MagicMock()
    provider.is_available.return_value = available
    provider.provider_name = name
    provider.get.side_effect = lambda key: (values or {}).get(key)
    return provider


class TestConfigManager:
    def test_default_chain_is_env_then_dotenv(self):
        manager = ConfigManager()
        assert isinstance(manager.providers[0], EnvVarProvider)
        assert isinstance(manager.providers[1], DotEnvProvider)

    def test_first_provider_wins(self):
        primary = _provider({"LEVERGUARD_LEVERAGE": "20"})
        fallback = _provider({"LEVERGUARD_LEVERAGE": "5"})
        manager = ConfigManager(providers=[primary, fallback])

        assert manager.get("LEVERGUARD_LEVERAGE") == "20"
        fallback.get.assert_not_called()

    def test_falls_through_missing_and_unavailable(self):
        offline = _provider({"KEY": "offline"}, available=False)
        empty = _provider({})
        fallback = _provider({"KEY": "fallback"})
        manager = ConfigManager(providers=[offline, empty, fallback])

        assert manager.get("KEY") == "fallback"
        offline.get.assert_not_called()

    def test_default_when_missing(self):
        manager = ConfigManager(providers=[_provider({})])
        assert manager.get("MISSING", default="x") == "x"

    def test_typed_getters(self):
        manager = ConfigManager(
            providers=[
                _provider(
                    {
                        "INT": "4",
                        "FLOAT": "0.35",
                        "BOOL": "Yes",
                    }
                )
            ]
        )
        assert manager.get_int("INT") == 4
        assert manager.get_float("FLOAT") == 0.35
        assert manager.get_bool("BOOL") is True
        assert manager.get_bool("NOPE", default=True) is True

    def test_invalid_numbers_fall_back_with_warning(self):
        manager = ConfigManager(providers=[_provider({"INT": "four", "FLOAT": "abc"})])
        with patch.object(config_module, "logger") as mock_logger:
            assert manager.get_int("INT", 2) == 2
            assert manager.get_float("FLOAT", 1.5) == 1.5
        assert mock_logger.warning.call_count == 2


class TestGlobalConfig:
    def test_set_and_get(self):
        custom = ConfigManager(providers=[_provider({})])
        set_config(custom)
        assert get_config() is custom

    def test_reset_creates_new_instance(self):
        set_config(None)
        first = get_config()
        assert isinstance(first, ConfigManager)
        assert get_config() is first


class TestProviders:
    def test_env_provider_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LEVERGUARD_FEE_MODE", "maker")
        provider = EnvVarProvider()
        assert provider.get("LEVERGUARD_FEE_MODE") == "maker"
        assert provider.get("LEVERGUARD_UNSET_KEY") is None
        assert provider.is_available()

    def test_dotenv_provider_reads_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LEVERGUARD_LEVERAGE=15\nLEVERGUARD_EMPTY\n# comment\n")
        provider = DotEnvProvider(str(env_file))

        assert provider.is_available()
        assert provider.get("LEVERGUARD_LEVERAGE") == "15"
        assert provider.get("LEVERGUARD_EMPTY") is None

    def test_dotenv_provider_missing_file(self, tmp_path):
        provider = DotEnvProvider(str(tmp_path / "absent.env"))
        assert not provider.is_available()
        assert provider.get("ANY") is None

