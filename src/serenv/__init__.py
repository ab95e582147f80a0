"""serenv: save the process environment and restore it later.

Example:
    >>> from serenv import capture_environment, get_emitter, load_snapshot, reconcile
    >>>
    >>> reconcile(load_snapshot(".serenv.dat"), capture_environment(), get_emitter("sh"))
"""

from serenv.env import (
    Assign,
    ChangeSink,
    EnvironmentChange,
    EnvironmentSnapshot,
    ReconcileStats,
    Unset,
    apply_changes,
    capture_environment,
    compute_changes,
    get_emitter,
    load_snapshot,
    reconcile,
    save_snapshot,
)
from serenv.errors import (
    ConfigurationError,
    SerenvError,
    SnapshotDecodingError,
    SnapshotEncodingError,
    SnapshotError,
    SnapshotIOError,
    SnapshotNotFoundError,
    UnknownDialectError,
    UnrepresentableValueError,
)
from serenv.logging import configure_logging, get_logger
from serenv.settings import SerenvSettings

__version__ = "0.2.0"

__all__ = [
    "__version__",
    # Core
    "EnvironmentSnapshot",
    "EnvironmentChange",
    "Unset",
    "Assign",
    "ReconcileStats",
    "ChangeSink",
    "capture_environment",
    "save_snapshot",
    "load_snapshot",
    "reconcile",
    "compute_changes",
    "apply_changes",
    "get_emitter",
    # Errors
    "SerenvError",
    "SnapshotError",
    "SnapshotIOError",
    "SnapshotNotFoundError",
    "SnapshotEncodingError",
    "SnapshotDecodingError",
    "ConfigurationError",
    "UnknownDialectError",
    "UnrepresentableValueError",
    # Ambient
    "SerenvSettings",
    "configure_logging",
    "get_logger",
]
