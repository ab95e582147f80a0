"""Tests for serenv logging module."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from serenv.logging import (
    HumanFormatter,
    JSONFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
)


def _record(level: int = logging.INFO, msg: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="serenv.test",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# =============================================================================
# JSONFormatter Tests
# =============================================================================


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format_basic_message(self) -> None:
        """Test formatting a basic log message."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "serenv.test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "location" not in data

    def test_format_with_extra(self) -> None:
        """Test extra fields become top-level keys."""
        data = json.loads(JSONFormatter().format(_record(path=".serenv.dat", variables=3)))

        assert data["path"] == ".serenv.dat"
        assert data["variables"] == 3

    def test_format_error_includes_location(self) -> None:
        """Test error logs include location info."""
        data = json.loads(JSONFormatter().format(_record(level=logging.ERROR)))

        assert data["location"]["line"] == 42

    def test_format_with_exception(self) -> None:
        """Test formatting includes exception info."""
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        record = _record(level=logging.ERROR)
        record.exc_info = exc_info
        data = json.loads(JSONFormatter().format(record))

        assert "ValueError" in data["exception"]


# =============================================================================
# HumanFormatter Tests
# =============================================================================


class TestHumanFormatter:
    """Tests for HumanFormatter."""

    def test_format_info_message(self) -> None:
        """Test formatting INFO message."""
        output = HumanFormatter().format(_record(msg="Info message"))

        assert "INFO" in output
        assert "Info message" in output

    def test_format_extra_as_key_value(self) -> None:
        """Test extra fields are appended as key=value."""
        output = HumanFormatter().format(_record(variables=7))

        assert output.endswith("variables=7")


# =============================================================================
# configure_logging Tests
# =============================================================================


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_debug_level(self) -> None:
        """Test configuring debug log level."""
        configure_logging(level="DEBUG")

        assert logging.getLogger("serenv").level == logging.DEBUG

    def test_configure_json_stream(self) -> None:
        """Test JSON output to a custom stream."""
        stream = io.StringIO()
        configure_logging(level="INFO", format="json", stream=stream)

        get_logger("env.test").info("Hello", answer=42)

        data = json.loads(stream.getvalue().strip())
        assert data["message"] == "Hello"
        assert data["answer"] == 42

    def test_reconfigure_replaces_handler(self) -> None:
        """Test repeated configuration does not stack handlers."""
        configure_logging(format="human")
        configure_logging(format="json")

        handlers = [
            h for h in logging.getLogger("serenv").handlers if getattr(h, "_serenv_handler", False)
        ]
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)

    def test_default_handler_follows_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the default handler writes to the current sys.stderr."""
        configure_logging(level="WARNING")

        get_logger("env.test").warning("Careful")

        assert "Careful" in capsys.readouterr().err


# =============================================================================
# get_logger / StructuredLogger Tests
# =============================================================================


class TestGetLogger:
    """Tests for get_logger function."""

    def test_namespaced(self) -> None:
        """Test component names are placed under serenv."""
        logger = get_logger("env.persistence")

        assert isinstance(logger, StructuredLogger)
        assert logger.name == "serenv.env.persistence"

    def test_already_namespaced(self) -> None:
        """Test serenv-prefixed names are used as-is."""
        assert get_logger("serenv.cli").name == "serenv.cli"
        assert get_logger("serenv").name == "serenv"


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_info_method(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test info logging with fields."""
        logger = StructuredLogger("serenv.test")

        with caplog.at_level(logging.INFO, logger="serenv"):
            logger.info("Test message", key1="value1")

        assert "Test message" in caplog.text
        assert caplog.records[-1].key1 == "value1"

    def test_error_method(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test error logging."""
        logger = StructuredLogger("serenv.test")

        with caplog.at_level(logging.ERROR, logger="serenv"):
            logger.error("Error occurred", error_code=500)

        assert "Error occurred" in caplog.text

    def test_exception_method(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test exception() attaches the active exception."""
        logger = StructuredLogger("serenv.test")

        with caplog.at_level(logging.ERROR, logger="serenv"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("Failed")

        assert caplog.records[-1].exc_info is not None

    def test_child_logger(self) -> None:
        """Test creating child logger."""
        child = StructuredLogger("serenv").child("env")

        assert isinstance(child, StructuredLogger)
        assert child.name == "serenv.env"
