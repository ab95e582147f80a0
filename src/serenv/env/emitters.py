"""Shell renderers for reconciliation changes.

Each emitter is a :class:`ChangeSink` that writes one shell statement per
change to a text stream. Names and values are decoded to text here, and only
here, using UTF-8 with replacement characters for undecodable bytes.

Supported dialects:
    sh:   POSIX shells (bash, zsh, dash, ...)
    cmd:  Windows cmd.exe
    fish: fish shell
    pwsh: PowerShell

Example:
    >>> emitter = get_emitter("sh")
    >>> reconcile(load_snapshot(), capture_environment(), emitter)
"""

from __future__ import annotations

import shlex
import sys
from abc import abstractmethod
from typing import TextIO

from serenv.errors import UnknownDialectError, UnrepresentableValueError

from .reconcile import ChangeSink


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class ShellEmitter(ChangeSink):
    """Base class for emitters writing line-oriented shell code.

    Subclasses implement :meth:`format_unset` and :meth:`format_assign`.
    """

    dialect: str = ""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.lines_written = 0

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so a redirected sys.stdout is honoured.
        return self._stream if self._stream is not None else sys.stdout

    @abstractmethod
    def format_unset(self, name: str) -> str:
        """Return the statement removing ``name``."""

    @abstractmethod
    def format_assign(self, name: str, value: str) -> str:
        """Return the statement setting ``name`` to ``value``."""

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.lines_written += 1

    def report_unset(self, name: bytes) -> None:
        self._write(self.format_unset(_text(name)))

    def report_assign(self, name: bytes, value: bytes) -> None:
        self._write(self.format_assign(_text(name), _text(value)))


class ShEmitter(ShellEmitter):
    """POSIX ``sh``: ``unset NAME;`` / ``export NAME=VALUE;``."""

    dialect = "sh"

    def format_unset(self, name: str) -> str:
        return f"unset {shlex.quote(name)};"

    def format_assign(self, name: str, value: str) -> str:
        return f"export {shlex.quote(name)}={shlex.quote(value)};"


class CmdEmitter(ShellEmitter):
    """Windows ``cmd.exe`` batch: ``set "NAME="`` / ``set "NAME=VALUE"``.

    Inside the quoted form ``&``, ``|``, ``<``, ``>``, ``^`` and parentheses
    are literal, and ``%`` is doubled so batch expansion leaves it alone.
    A double quote would end the quoted region and CR/LF would end the
    statement, so names and values holding them raise
    :class:`UnrepresentableValueError` instead of being written. ``!`` is
    only special when delayed expansion is enabled, which it is not by
    default.

    cmd has no way to hold an empty variable, so assigning ``""`` removes it.
    """

    dialect = "cmd"

    _FORBIDDEN = {'"': "double quote", "\r": "carriage return", "\n": "newline"}

    def quote(self, name: str, value: str) -> str:
        """Render ``NAME=VALUE`` as one quoted batch token."""
        if not name or "=" in name:
            raise UnrepresentableValueError(name, self.dialect, "name is empty or contains '='")
        for text in (name, value):
            for char, label in self._FORBIDDEN.items():
                if char in text:
                    raise UnrepresentableValueError(name, self.dialect, f"contains a {label}")
        return '"' + f"{name}={value}".replace("%", "%%") + '"'

    def format_unset(self, name: str) -> str:
        return f"set {self.quote(name, '')}"

    def format_assign(self, name: str, value: str) -> str:
        return f"set {self.quote(name, value)}"


class FishEmitter(ShellEmitter):
    """fish: ``set -e NAME;`` / ``set -gx NAME VALUE;``."""

    dialect = "fish"

    @staticmethod
    def quote(text: str) -> str:
        # Inside fish single quotes only \\ and \' are special.
        return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"

    def format_unset(self, name: str) -> str:
        return f"set -e {self.quote(name)};"

    def format_assign(self, name: str, value: str) -> str:
        return f"set -gx {self.quote(name)} {self.quote(value)};"


class PwshEmitter(ShellEmitter):
    """PowerShell: ``Remove-Item Env:NAME`` / ``${env:NAME} = 'VALUE'``.

    Single-quoted strings are literal apart from ``''`` and may span lines.
    Assigning ``''`` to an ``env:`` variable removes it, so an empty saved
    value is restored as an absent variable.
    """

    dialect = "pwsh"

    @staticmethod
    def quote(text: str) -> str:
        return "'" + text.replace("'", "''") + "'"

    @staticmethod
    def variable(name: str) -> str:
        escaped = name.replace("`", "``").replace("{", "`{").replace("}", "`}")
        return "${env:" + escaped + "}"

    def format_unset(self, name: str) -> str:
        path = self.quote(f"Env:{name}")
        return f"Remove-Item -LiteralPath {path} -ErrorAction SilentlyContinue;"

    def format_assign(self, name: str, value: str) -> str:
        return f"{self.variable(name)} = {self.quote(value)};"


EMITTERS: dict[str, type[ShellEmitter]] = {
    ShEmitter.dialect: ShEmitter,
    CmdEmitter.dialect: CmdEmitter,
    FishEmitter.dialect: FishEmitter,
    PwshEmitter.dialect: PwshEmitter,
}

SUPPORTED_DIALECTS = list(EMITTERS)


def get_emitter(dialect: str, stream: TextIO | None = None) -> ShellEmitter:
    """Create the emitter for ``dialect``.

    Raises:
        UnknownDialectError: If the dialect is not supported.
    """
    try:
        emitter_cls = EMITTERS[dialect.lower()]
    except KeyError:
        raise UnknownDialectError(dialect, SUPPORTED_DIALECTS) from None
    return emitter_cls(stream)
