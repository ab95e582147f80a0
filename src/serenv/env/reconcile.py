"""Snapshot-vs-live reconciliation.

:func:`reconcile` compares a saved snapshot with the live environment and
reports the smallest set of changes that turns live back into saved:

- ``Unset(name)`` for every name that is live but not saved.
- ``Assign(name, value)`` for every saved name that is missing live or has a
  different live value.
- nothing for names present on both sides with equal values.

Names are visited in lexicographic byte order: first every live name, then the
saved names that were not live. Output is therefore reproducible across runs.

The engine knows nothing about shells. Changes are pushed to a
:class:`ChangeSink`; renderers in :mod:`serenv.env.emitters` turn them into
shell statements.

Example:
    >>> saved = EnvironmentSnapshot.from_mapping({"A": "1", "B": "x"})
    >>> live = EnvironmentSnapshot.from_mapping({"A": "1", "C": "y"})
    >>> compute_changes(saved, live)
    [Unset(name=b'C'), Assign(name=b'B', value=b'x')]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from serenv.logging import get_logger

from .snapshot import EnvironmentSnapshot

logger = get_logger("env.reconcile")


# =============================================================================
# Changes
# =============================================================================


@dataclass(frozen=True)
class Unset:
    """Remove ``name`` from the environment."""

    name: bytes

    def apply(self, variables: dict[bytes, bytes]) -> None:
        variables.pop(self.name, None)


@dataclass(frozen=True)
class Assign:
    """Set ``name`` to ``value``."""

    name: bytes
    value: bytes

    def apply(self, variables: dict[bytes, bytes]) -> None:
        variables[self.name] = self.value


EnvironmentChange = Union[Unset, Assign]


def apply_changes(
    snapshot: EnvironmentSnapshot,
    changes: Iterable[EnvironmentChange],
) -> EnvironmentSnapshot:
    """Return a new snapshot with ``changes`` applied in order."""
    variables = dict(snapshot.variables)
    for change in changes:
        change.apply(variables)
    return EnvironmentSnapshot(variables)


# =============================================================================
# Sinks
# =============================================================================


class ChangeSink(ABC):
    """Receiver of the changes computed by :func:`reconcile`.

    Each method is called once per change, synchronously, in the order the
    engine visits names.
    """

    @abstractmethod
    def report_unset(self, name: bytes) -> None:
        """``name`` is live but not saved; it must be removed."""

    @abstractmethod
    def report_assign(self, name: bytes, value: bytes) -> None:
        """``name`` must be set to the saved ``value``."""


class CollectingSink(ChangeSink):
    """Sink that records changes in a list."""

    def __init__(self) -> None:
        self.changes: list[EnvironmentChange] = []

    def report_unset(self, name: bytes) -> None:
        self.changes.append(Unset(name))

    def report_assign(self, name: bytes, value: bytes) -> None:
        self.changes.append(Assign(name, value))


# =============================================================================
# Engine
# =============================================================================


@dataclass
class ReconcileStats:
    """Counts of how each visited name was classified.

    Attributes:
        unset: Names reported as Unset.
        assigned: Names reported as Assign.
        unchanged: Names equal on both sides (no change reported).
    """

    unset: int = 0
    assigned: int = 0
    unchanged: int = 0
    unchanged_names: list[bytes] = field(default_factory=list, repr=False)

    @property
    def total_changes(self) -> int:
        return self.unset + self.assigned

    @property
    def visited(self) -> int:
        return self.total_changes + self.unchanged

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0

    def summary(self) -> str:
        if not self.has_changes:
            return f"No changes ({self.unchanged} unchanged)"
        return f"{self.unset} to unset, {self.assigned} to assign, {self.unchanged} unchanged"

    def to_dict(self) -> dict[str, Any]:
        return {
            "unset": self.unset,
            "assigned": self.assigned,
            "unchanged": self.unchanged,
            "total_changes": self.total_changes,
        }


def reconcile(
    saved: EnvironmentSnapshot,
    live: EnvironmentSnapshot,
    sink: ChangeSink,
) -> ReconcileStats:
    """Report the changes that transform ``live`` into ``saved``.

    Args:
        saved: The snapshot to restore.
        live: The current environment.
        sink: Receives one call per change.

    Returns:
        ReconcileStats with the classification counts.
    """
    stats = ReconcileStats()
    handled: set[bytes] = set()

    for name in live.names():
        saved_value = saved.get(name)
        if saved_value is None:
            sink.report_unset(name)
            stats.unset += 1
            continue

        if saved_value == live[name]:
            stats.unchanged += 1
            stats.unchanged_names.append(name)
        else:
            sink.report_assign(name, saved_value)
            stats.assigned += 1

        handled.add(name)

    for name in saved.names():
        if name in handled:
            continue
        sink.report_assign(name, saved[name])
        stats.assigned += 1

    logger.debug("Reconciled environment", **stats.to_dict())
    return stats


def compute_changes(
    saved: EnvironmentSnapshot,
    live: EnvironmentSnapshot,
) -> list[EnvironmentChange]:
    """Return the changes :func:`reconcile` would report, as a list."""
    sink = CollectingSink()
    reconcile(saved, live, sink)
    return sink.changes
