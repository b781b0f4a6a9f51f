"""Tests for ConfigManager and the global configuration helpers."""

from __future__ import annotations

import json

import pytest
import toml

from ccannounce.config import config as config_module
from ccannounce.config.config import (
    ConfigManager,
    get_announce_config,
    get_config,
    get_network_config,
    get_observability_config,
    init_config,
    reload_config,
    reset_config,
    set_config,
)
from ccannounce.models import Config, LogLevel
from ccannounce.utils.exceptions import ConfigurationError

pytestmark = [pytest.mark.unit, pytest.mark.config]


class TestConfigManager:
    """Loading order: defaults, then file, then environment."""

    def test_defaults_without_file(self):
        manager = ConfigManager()

        assert manager.config_file is None
        assert manager.config.announce.default_interval == 1800.0
        assert manager.config.announce.numwant == 50
        assert manager.config.network.tracker_timeout == 30.0
        assert manager.config.observability.log_level == LogLevel.INFO

    def test_explicit_file(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            """
[announce]
default_interval = 600
numwant = 10

[network]
user_agent = "test-agent"
"""
        )

        manager = ConfigManager(config_file=str(config_file))

        assert manager.config.announce.default_interval == 600
        assert manager.config.announce.numwant == 10
        assert manager.config.network.user_agent == "test-agent"

    def test_file_found_in_working_directory(self, tmp_path):
        (tmp_path / "ccannounce.toml").write_text("[announce]\nleft = 42\n")

        manager = ConfigManager()

        assert manager.config_file == tmp_path / "ccannounce.toml"
        assert manager.config.announce.left == 42

    def test_file_found_in_home_config_dir(self, tmp_path):
        config_dir = tmp_path / ".config" / "ccannounce"
        config_dir.mkdir(parents=True)
        (config_dir / "ccannounce.toml").write_text("[announce]\nuploaded = 7\n")

        assert ConfigManager().config.announce.uploaded == 7

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[announce]\nnumwant = 10\n")
        monkeypatch.setenv("CCANNOUNCE_NUMWANT", "25")
        monkeypatch.setenv("CCANNOUNCE_TRACKER_TIMEOUT", "2.5")
        monkeypatch.setenv("CCANNOUNCE_STRUCTURED_LOGGING", "off")
        monkeypatch.setenv("CCANNOUNCE_COMPACT", "1")

        config = ConfigManager(config_file=config_file).config

        assert config.announce.numwant == 25
        assert config.announce.compact == 1
        assert config.network.tracker_timeout == 2.5
        assert config.observability.structured_logging is False

    def test_unreadable_toml_falls_back_to_defaults(self, tmp_path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[announce\nnumwant = ")

        assert ConfigManager(config_file=config_file).config.announce.numwant == 50

    def test_invalid_values_raise(self, tmp_path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[announce]\ndefault_interval = -1\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ConfigManager(config_file=config_file)

    def test_invalid_environment_value_raises(self, monkeypatch):
        monkeypatch.setenv("CCANNOUNCE_PEER_ID_PREFIX", "x" * 20)

        with pytest.raises(ConfigurationError):
            ConfigManager()

    def test_export_toml_and_json(self):
        manager = ConfigManager()

        exported = toml.loads(manager.export("toml"))
        assert exported["announce"]["numwant"] == 50
        assert exported["observability"]["log_level"] == "INFO"
        assert "log_file" not in exported["observability"]

        assert json.loads(manager.export("json"))["network"]["tracker_timeout"] == 30.0

    def test_export_unknown_format(self):
        with pytest.raises(ConfigurationError, match="Unsupported export format"):
            ConfigManager().export("yaml")


class TestGlobalConfig:
    """Module-level accessors share one ConfigManager."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()
        assert get_announce_config() is get_config().announce
        assert get_network_config() is get_config().network
        assert get_observability_config() is get_config().observability

    def test_init_config_replaces_manager(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[announce]\nnumwant = 3\n")

        manager = init_config(config_file)

        assert config_module._config_manager is manager
        assert get_config().announce.numwant == 3

    def test_reload_requires_init(self):
        reset_config()
        with pytest.raises(ConfigurationError, match="not initialized"):
            reload_config()

    def test_reload_picks_up_file_changes(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[announce]\nnumwant = 3\n")
        init_config(config_file)

        config_file.write_text("[announce]\nnumwant = 4\n")

        assert reload_config().announce.numwant == 4
        assert get_config().announce.numwant == 4

    def test_set_config(self):
        custom = Config(announce={"default_interval": 5})

        set_config(custom)

        assert get_config() is custom
        assert get_announce_config().default_interval == 5
