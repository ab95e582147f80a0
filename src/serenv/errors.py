"""Error hierarchy for serenv.

All errors raised by serenv derive from :class:`SerenvError`, which carries an
optional hint and docs URL that the CLI renders for the user.

Hierarchy:
    SerenvError
    ├── SnapshotError
    │   ├── SnapshotIOError
    │   ├── SnapshotNotFoundError
    │   ├── SnapshotEncodingError
    │   └── SnapshotDecodingError
    ├── ConfigurationError
    │   └── UnknownDialectError
    └── UnrepresentableValueError

Example:
    >>> from serenv.errors import SnapshotNotFoundError
    >>>
    >>> try:
    ...     load_snapshot(".serenv.dat")
    ... except SnapshotNotFoundError as e:
    ...     print(e.hint)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

__all__ = [
    "SerenvError",
    "SnapshotError",
    "SnapshotIOError",
    "SnapshotNotFoundError",
    "SnapshotEncodingError",
    "SnapshotDecodingError",
    "ConfigurationError",
    "UnknownDialectError",
    "UnrepresentableValueError",
    "log_exception",
]


def log_exception(
    logger: logging.Logger | Any,
    message: str,
    exc: BaseException,
    level: Literal["debug", "info", "warning", "error"] = "warning",
    include_traceback: bool = True,
) -> None:
    """Log an exception with a consistent format.

    Args:
        logger: A stdlib logger or a StructuredLogger.
        message: Context describing what failed.
        exc: The exception being logged.
        level: Log level name.
        include_traceback: Attach exc_info to the record.
    """
    log = getattr(logger, level)
    text = f"{message}: {type(exc).__name__}: {exc}"
    if include_traceback:
        log(text, exc_info=exc)
    else:
        log(text)


# =============================================================================
# Base Error
# =============================================================================


class SerenvError(Exception):
    """Base exception for all serenv errors.

    Attributes:
        message: Human-readable error message.
        details: Additional structured context.
        hint: Suggestion for fixing the error.
        docs_url: Link to relevant documentation.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
        docs_url: str | None = None,
    ):
        self.message = message
        self.details = details or {}
        self.hint = hint
        self.docs_url = docs_url
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.docs_url:
            parts.append(f"Docs: {self.docs_url}")
        return "\n".join(parts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


# =============================================================================
# Snapshot Errors
# =============================================================================


class SnapshotError(SerenvError):
    """Base error for reading or writing the persisted snapshot."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
        docs_url: str | None = None,
    ):
        self.path = Path(path) if path is not None else None
        details = dict(details or {})
        if self.path is not None:
            details["path"] = str(self.path)
        super().__init__(message, details=details, hint=hint, docs_url=docs_url)


class SnapshotIOError(SnapshotError):
    """The snapshot file could not be opened, created, read or written."""


class SnapshotNotFoundError(SnapshotError):
    """No snapshot exists at the requested path."""

    def __init__(self, path: str | Path, *, hint: str | None = None):
        super().__init__(
            f"No saved environment found at {path}",
            path=path,
            hint=hint or "Run `serenv save` first to capture the current environment",
        )


class SnapshotEncodingError(SnapshotError):
    """The snapshot could not be serialized."""


class SnapshotDecodingError(SnapshotError):
    """The snapshot file is corrupt or was not written by serenv."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            path=path,
            details=details,
            hint="Re-create the file with `serenv save`",
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SerenvError):
    """Invalid settings or command-line configuration."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        hint: str | None = None,
    ):
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details=details, hint=hint)


class UnknownDialectError(ConfigurationError):
    """The requested shell dialect has no emitter."""

    def __init__(self, dialect: str, supported: list[str]):
        self.dialect = dialect
        self.supported = supported
        super().__init__(
            f"Unknown shell dialect: {dialect}",
            config_key="dialect",
            hint=f"Supported: {', '.join(supported)}",
        )


# =============================================================================
# Rendering Errors
# =============================================================================


class UnrepresentableValueError(SerenvError):
    """A variable cannot be written safely in the requested shell dialect."""

    def __init__(self, name: str, dialect: str, reason: str):
        self.name = name
        self.dialect = dialect
        super().__init__(
            f"Cannot restore {name!r} with {dialect}: {reason}",
            details={"variable": name, "dialect": dialect},
            hint="Restore this environment with another dialect, e.g. `serenv emit-pwsh`",
        )
