"""Environment snapshot capture.

An :class:`EnvironmentSnapshot` is an immutable mapping of variable names to
values, both held as raw ``bytes``. Environment variables are not guaranteed
to be valid text, so nothing here decodes them; conversion to ``str`` only
happens when a change is rendered as shell code.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Union

from serenv.logging import get_logger

logger = get_logger("env.snapshot")

TextOrBytes = Union[str, bytes]


# =============================================================================
# Data Model
# =============================================================================


def _to_bytes(value: TextOrBytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return os.fsencode(value)


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Captured environment state.

    Attributes:
        variables: Read-only mapping of variable name to value (both bytes).
        captured_at: When the snapshot was taken. Not part of equality.

    Example:
        >>> snap = EnvironmentSnapshot.from_mapping({"A": "1", "B": "x"})
        >>> snap.names()
        [b'A', b'B']
        >>> snap[b"A"]
        b'1'
    """

    variables: Mapping[bytes, bytes] = field(default_factory=dict)
    captured_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    def __post_init__(self) -> None:
        frozen = dict(self.variables)
        for name, value in frozen.items():
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise TypeError(
                    f"Snapshot names and values must be bytes, got {type(name).__name__}"
                    f"={type(value).__name__}"
                )
        object.__setattr__(self, "variables", MappingProxyType(frozen))

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[TextOrBytes, TextOrBytes],
        captured_at: datetime | None = None,
    ) -> EnvironmentSnapshot:
        """Build a snapshot from a mapping of str or bytes.

        ``str`` names and values are encoded with :func:`os.fsencode`, the same
        encoding the interpreter uses for the process environment.
        """
        variables = {_to_bytes(k): _to_bytes(v) for k, v in mapping.items()}
        if captured_at is None:
            return cls(variables)
        return cls(variables, captured_at)

    def __getitem__(self, name: bytes) -> bytes:
        return self.variables[name]

    def __contains__(self, name: object) -> bool:
        return name in self.variables

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.variables)

    def get(self, name: bytes, default: bytes | None = None) -> bytes | None:
        return self.variables.get(name, default)

    def names(self) -> list[bytes]:
        """Variable names in lexicographic byte order."""
        return sorted(self.variables)

    def items(self) -> list[tuple[bytes, bytes]]:
        """(name, value) pairs in lexicographic name order."""
        return [(name, self.variables[name]) for name in self.names()]

    def summary(self) -> str:
        return f"EnvironmentSnapshot: {len(self)} variables, captured {self.captured_at.isoformat()}"


# =============================================================================
# Capture
# =============================================================================


def capture_environment() -> EnvironmentSnapshot:
    """Capture every variable in the current process environment.

    No filtering, sorting or transformation is applied. Values are captured
    byte-exactly from ``os.environb`` where the platform exposes a bytes
    environment, otherwise from ``os.environ`` encoded with ``os.fsencode``.
    """
    if os.supports_bytes_environ:
        variables = dict(os.environb)
    else:
        variables = {os.fsencode(k): os.fsencode(v) for k, v in os.environ.items()}

    snapshot = EnvironmentSnapshot(variables)
    logger.debug("Captured environment", variables=len(snapshot))
    return snapshot
