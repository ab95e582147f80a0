"""Environment snapshots and reconciliation.

This package provides:
- Environment capture into immutable byte-exact snapshots
- Snapshot persistence to a single binary file
- Reconciliation of a saved snapshot against the live environment
- Shell renderers for the resulting changes
"""

from __future__ import annotations

from serenv.env.emitters import (
    EMITTERS,
    SUPPORTED_DIALECTS,
    CmdEmitter,
    FishEmitter,
    PwshEmitter,
    ShellEmitter,
    ShEmitter,
    get_emitter,
)
from serenv.env.persistence import (
    DEFAULT_SNAPSHOT_FILE,
    FORMAT_MARKER,
    FORMAT_VERSION,
    decode_snapshot,
    encode_snapshot,
    load_snapshot,
    save_snapshot,
)
from serenv.env.reconcile import (
    Assign,
    ChangeSink,
    CollectingSink,
    EnvironmentChange,
    ReconcileStats,
    Unset,
    apply_changes,
    compute_changes,
    reconcile,
)
from serenv.env.snapshot import EnvironmentSnapshot, capture_environment

__all__ = [
    # Data models
    "EnvironmentSnapshot",
    "EnvironmentChange",
    "Unset",
    "Assign",
    "ReconcileStats",
    # Capture
    "capture_environment",
    # Persistence
    "save_snapshot",
    "load_snapshot",
    "encode_snapshot",
    "decode_snapshot",
    # Reconciliation
    "reconcile",
    "compute_changes",
    "apply_changes",
    "ChangeSink",
    "CollectingSink",
    # Emitters
    "ShellEmitter",
    "ShEmitter",
    "CmdEmitter",
    "FishEmitter",
    "PwshEmitter",
    "get_emitter",
    # Constants
    "DEFAULT_SNAPSHOT_FILE",
    "FORMAT_MARKER",
    "FORMAT_VERSION",
    "EMITTERS",
    "SUPPORTED_DIALECTS",
]
