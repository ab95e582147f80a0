"""Tests for serenv settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from serenv.env.persistence import DEFAULT_SNAPSHOT_FILE
from serenv.errors import ConfigurationError
from serenv.settings import SerenvSettings


class TestSerenvSettings:
    """Tests for SerenvSettings."""

    def test_defaults(self) -> None:
        """Test defaults when no variables are set."""
        settings = SerenvSettings.from_env({})

        assert settings.snapshot_path == Path(DEFAULT_SNAPSHOT_FILE)
        assert settings.log_level == "WARNING"
        assert settings.log_format == "human"

    def test_from_env(self) -> None:
        """Test SERENV_* variables are read."""
        settings = SerenvSettings.from_env(
            {
                "SERENV_SNAPSHOT_PATH": "/tmp/env.dat",
                "SERENV_LOG_LEVEL": "debug",
                "SERENV_LOG_FORMAT": "JSON",
            }
        )

        assert settings.snapshot_path == Path("/tmp/env.dat")
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test os.environ is used by default."""
        monkeypatch.setenv("SERENV_SNAPSHOT_PATH", "custom.dat")

        assert SerenvSettings.from_env().snapshot_path == Path("custom.dat")

    def test_empty_variable_ignored(self) -> None:
        """Test empty variables fall back to defaults."""
        settings = SerenvSettings.from_env({"SERENV_SNAPSHOT_PATH": ""})

        assert settings.snapshot_path == Path(DEFAULT_SNAPSHOT_FILE)

    def test_invalid_level(self) -> None:
        """Test an unknown log level raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            SerenvSettings.from_env({"SERENV_LOG_LEVEL": "chatty"})

        assert exc_info.value.config_key == "log_level"

    def test_invalid_format(self) -> None:
        """Test an unknown log format raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            SerenvSettings.from_env({"SERENV_LOG_FORMAT": "xml"})

        assert exc_info.value.config_key == "log_format"

    def test_overrides(self) -> None:
        """Test non-None overrides win and None is ignored."""
        base = SerenvSettings.from_env({"SERENV_LOG_LEVEL": "INFO"})
        settings = base.with_overrides(log_level="error", log_format=None)

        assert settings.log_level == "ERROR"
        assert settings.log_format == "human"
        assert base.log_level == "INFO"

    def test_frozen(self) -> None:
        """Test settings are immutable."""
        settings = SerenvSettings()

        with pytest.raises(Exception):
            settings.log_level = "DEBUG"  # type: ignore[misc]
