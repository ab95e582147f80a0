"""Structured logging for serenv.

All serenv loggers live under the ``serenv`` namespace and write to stderr,
so that shell statements printed on stdout stay safe to ``eval``.

Example:
    >>> from serenv.logging import configure_logging, get_logger
    >>>
    >>> configure_logging(level="DEBUG", format="json")
    >>> logger = get_logger("env.persistence")
    >>> logger.info("Snapshot saved", path=".serenv.dat", variables=42)
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import IO, Any, Literal

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

ROOT_LOGGER_NAME = "serenv"

# Attributes present on every LogRecord; anything else came from `extra`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
    | {"message", "asctime"}
)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED_ATTRS}


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.ERROR:
            data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        data.update(_extra_fields(record))
        return json.dumps(data, default=str)


class HumanFormatter(logging.Formatter):
    """Readable single-line format: ``LEVEL    logger: message key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname:<8} {record.name}: {record.getMessage()}"

        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())

        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()

        return line


# =============================================================================
# Structured Logger
# =============================================================================


class StructuredLogger:
    """Thin wrapper around :class:`logging.Logger` taking keyword fields.

    Keyword arguments other than ``exc_info`` are attached to the record as
    ``extra`` fields, which the JSON formatter emits as top-level keys.
    """

    def __init__(self, name: str):
        self.name = name
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: Any = None, **fields: Any) -> None:
        self._logger.log(level, message, exc_info=exc_info, extra=fields or None)

    def debug(self, message: str, exc_info: Any = None, **fields: Any) -> None:
        self._log(logging.DEBUG, message, exc_info, **fields)

    def info(self, message: str, exc_info: Any = None, **fields: Any) -> None:
        self._log(logging.INFO, message, exc_info, **fields)

    def warning(self, message: str, exc_info: Any = None, **fields: Any) -> None:
        self._log(logging.WARNING, message, exc_info, **fields)

    def error(self, message: str, exc_info: Any = None, **fields: Any) -> None:
        self._log(logging.ERROR, message, exc_info, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, exc_info=True, **fields)

    def child(self, suffix: str) -> StructuredLogger:
        """Create a logger nested under this one."""
        return StructuredLogger(f"{self.name}.{suffix}")


# =============================================================================
# Configuration
# =============================================================================


class _StderrHandler(logging.StreamHandler):
    """StreamHandler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property  # type: ignore[override]
    def stream(self) -> IO[str]:
        return sys.stderr

    @stream.setter
    def stream(self, value: IO[str]) -> None:
        pass


def configure_logging(
    level: str | int = "WARNING",
    format: Literal["human", "json"] = "human",
    stream: IO[str] | None = None,
) -> None:
    """Configure the ``serenv`` logger.

    Replaces any handler installed by a previous call, so it is safe to call
    more than once.

    Args:
        level: Log level name or number.
        format: "human" for readable lines, "json" for one JSON object per line.
        stream: Output stream (default: stderr).
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(root.handlers):
        if getattr(handler, "_serenv_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream) if stream is not None else _StderrHandler()
    handler.setFormatter(JSONFormatter() if format == "json" else HumanFormatter())
    handler._serenv_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger under the ``serenv`` namespace.

    Args:
        name: Component name, e.g. "env.persistence". Names already starting
            with "serenv" are used as-is.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return StructuredLogger(name)
