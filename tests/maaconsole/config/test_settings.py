import os
from pathlib import Path
from unittest.mock import patch

import pydantic
import pytest
import yaml

from maaconsole.config.models import (
    CONFIG_PATH_ENV,
    ConsoleSettings,
    StartupMode,
    expand_path,
    resolve_config_path,
)


class TestConsoleSettings:
    """Tests for ConsoleSettings defaults and validation."""

    def test_defaults(self):
        settings = ConsoleSettings()

        assert settings.backend_url == "ws://127.0.0.1:8765"
        assert settings.log_capacity == 200
        assert settings.startup_mode is StartupMode.RECONCILE
        assert settings.request_timeout is None
        assert settings.log_level == "WARNING"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MAACONSOLE_LOG_CAPACITY", "20")
        monkeypatch.setenv("MAACONSOLE_STARTUP_MODE", "pull_then_subscribe")

        settings = ConsoleSettings()

        assert settings.log_capacity == 20
        assert settings.startup_mode is StartupMode.PULL_THEN_SUBSCRIBE

    def test_rejects_non_websocket_url(self):
        with pytest.raises(pydantic.ValidationError, match="ws://"):
            ConsoleSettings(backend_url="http://127.0.0.1:8765")

    def test_rejects_zero_capacity(self):
        with pytest.raises(pydantic.ValidationError):
            ConsoleSettings(log_capacity=0)

    def test_log_level_normalized(self):
        assert ConsoleSettings(log_level="debug").log_level == "DEBUG"

    def test_rejects_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("MAACONSOLE_LOG_LEVEL", "LOUD")

        with pytest.raises(pydantic.ValidationError, match="Unknown log level: LOUD"):
            ConsoleSettings()

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(pydantic.ValidationError):
            ConsoleSettings(connect_timeout=0)


class TestExpandPath:
    """Tests for expand_path function."""

    def test_expands_user(self, temp_dir):
        assert expand_path("~/console.yaml") == temp_dir / "console.yaml"

    def test_expands_env_var(self):
        with patch.dict(os.environ, {"MAA_HOME": "/opt/maa"}):
            assert expand_path("$MAA_HOME/console.yaml") == Path("/opt/maa/console.yaml")

    def test_accepts_path(self):
        assert expand_path(Path("/etc/console.yaml")) == Path("/etc/console.yaml")


class TestResolveConfigPath:
    """Tests for config path resolution."""

    def test_explicit_path_wins(self, monkeypatch, temp_dir):
        monkeypatch.setenv(CONFIG_PATH_ENV, str(temp_dir / "env.yaml"))

        assert resolve_config_path(temp_dir / "explicit.yaml") == temp_dir / "explicit.yaml"

    def test_environment_variable(self, monkeypatch, temp_dir):
        monkeypatch.setenv(CONFIG_PATH_ENV, str(temp_dir / "env.yaml"))

        assert resolve_config_path() == temp_dir / "env.yaml"

    def test_default_under_home(self, temp_dir):
        assert resolve_config_path() == temp_dir / ".config" / "easy_maa" / "console.yaml"


class TestLoad:
    """Tests for ConsoleSettings.load."""

    def test_missing_file_uses_defaults(self, temp_dir):
        settings = ConsoleSettings.load(temp_dir / "missing.yaml")

        assert settings == ConsoleSettings()

    def test_reads_file(self, temp_dir):
        path = temp_dir / "console.yaml"
        path.write_text(yaml.dump({"backend_url": "wss://supervisor:443", "log_capacity": 10}))

        settings = ConsoleSettings.load(path)

        assert settings.backend_url == "wss://supervisor:443"
        assert settings.log_capacity == 10

    def test_default_location(self, temp_dir):
        path = temp_dir / ".config" / "easy_maa" / "console.yaml"
        path.parent.mkdir(parents=True)
        path.write_text("log_capacity: 7\n")

        assert ConsoleSettings.load().log_capacity == 7

    def test_file_values_override_environment(self, monkeypatch, temp_dir):
        monkeypatch.setenv("MAACONSOLE_LOG_CAPACITY", "20")
        path = temp_dir / "console.yaml"
        path.write_text("log_capacity: 10\n")

        assert ConsoleSettings.load(path).log_capacity == 10

    def test_unparsable_file_falls_back(self, temp_dir, caplog):
        path = temp_dir / "console.yaml"
        path.write_text("backend_url: [unclosed\n")

        settings = ConsoleSettings.load(path)

        assert settings == ConsoleSettings()
        assert "Failed to load config file" in caplog.text

    def test_invalid_values_fall_back(self, temp_dir):
        path = temp_dir / "console.yaml"
        path.write_text("log_capacity: -1\n")

        assert ConsoleSettings.load(path).log_capacity == 200

    def test_unknown_log_level_in_file_falls_back(self, temp_dir):
        path = temp_dir / "console.yaml"
        path.write_text("log_level: loud\nlog_capacity: 3\n")

        settings = ConsoleSettings.load(path)

        assert settings.log_level == "WARNING"
        assert settings.log_capacity == 200

    def test_unsupported_suffix_falls_back(self, temp_dir):
        path = temp_dir / "console.toml"
        path.write_text("log_capacity = 3\n")

        assert ConsoleSettings.load(path).log_capacity == 200
