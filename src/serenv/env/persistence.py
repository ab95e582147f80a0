"""Snapshot persistence.

A snapshot is stored as a single gzip-compressed JSON document. Variable names
and values are base64-encoded so they survive byte-exactly, and the document
carries a format marker and version so foreign or corrupt files are rejected
instead of being misread.

Document layout::

    {
        "format": "serenv-snapshot",
        "version": 1,
        "captured_at": "2026-01-15T10:30:45+00:00",
        "variables": {"<base64 name>": "<base64 value>", ...}
    }

Saving is not atomic: a failed save may leave a truncated file behind.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from serenv.errors import (
    SnapshotDecodingError,
    SnapshotEncodingError,
    SnapshotIOError,
    SnapshotNotFoundError,
)
from serenv.logging import get_logger

from .snapshot import EnvironmentSnapshot

logger = get_logger("env.persistence")


# =============================================================================
# Constants
# =============================================================================


# Default artifact location, relative to the current working directory
DEFAULT_SNAPSHOT_FILE = ".serenv.dat"

FORMAT_MARKER = "serenv-snapshot"
FORMAT_VERSION = 1

COMPRESS_LEVEL = 6


# =============================================================================
# Document Schema
# =============================================================================


class SnapshotDocument(BaseModel):
    """On-disk schema of a snapshot."""

    format: Literal["serenv-snapshot"]
    version: Literal[1]
    captured_at: datetime
    variables: dict[str, str]


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


def encode_snapshot(snapshot: EnvironmentSnapshot) -> bytes:
    """Serialize a snapshot to the binary artifact format.

    Raises:
        SnapshotEncodingError: If the snapshot cannot be serialized.
    """
    try:
        document = SnapshotDocument(
            format=FORMAT_MARKER,
            version=FORMAT_VERSION,
            captured_at=snapshot.captured_at,
            variables={_b64encode(k): _b64encode(v) for k, v in snapshot.items()},
        )
        payload = document.model_dump_json().encode("utf-8")
    except (PydanticSerializationError, ValidationError) as e:
        raise SnapshotEncodingError(f"Could not serialize snapshot: {e}") from e

    return gzip.compress(payload, compresslevel=COMPRESS_LEVEL)


def decode_snapshot(data: bytes, path: str | Path | None = None) -> EnvironmentSnapshot:
    """Deserialize a snapshot from the binary artifact format.

    Args:
        data: Raw file contents.
        path: Source path, used only in error messages.

    Raises:
        SnapshotDecodingError: If the bytes are not a valid snapshot.
    """
    try:
        payload = gzip.decompress(data)
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        raise SnapshotDecodingError(f"Not a serenv snapshot: {e}", path=path) from e

    try:
        document = SnapshotDocument.model_validate_json(payload)
    except ValidationError as e:
        raise SnapshotDecodingError(
            f"Invalid snapshot document: {e.error_count()} error(s)",
            path=path,
            details={"errors": e.errors(include_url=False)},
        ) from e

    variables: dict[bytes, bytes] = {}
    try:
        for name, value in document.variables.items():
            variables[_b64decode(name)] = _b64decode(value)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise SnapshotDecodingError(f"Invalid variable encoding: {e}", path=path) from e

    return EnvironmentSnapshot(variables, document.captured_at)


# =============================================================================
# Save / Load
# =============================================================================


def save_snapshot(
    snapshot: EnvironmentSnapshot,
    path: str | Path = DEFAULT_SNAPSHOT_FILE,
) -> Path:
    """Write a snapshot to disk, replacing any existing file.

    Args:
        snapshot: Snapshot to save.
        path: Destination file.

    Returns:
        Path the snapshot was written to.

    Raises:
        SnapshotIOError: If the file cannot be created or written.
        SnapshotEncodingError: If the snapshot cannot be serialized.
    """
    file_path = Path(path)
    data = encode_snapshot(snapshot)

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
    except OSError as e:
        raise SnapshotIOError(
            f"Could not write snapshot to {file_path}: {e.strerror or e}",
            path=file_path,
        ) from e

    logger.info("Snapshot saved", path=str(file_path), variables=len(snapshot), size=len(data))
    return file_path


def load_snapshot(path: str | Path = DEFAULT_SNAPSHOT_FILE) -> EnvironmentSnapshot:
    """Read a snapshot previously written by :func:`save_snapshot`.

    Raises:
        SnapshotNotFoundError: If no file exists at ``path``.
        SnapshotIOError: If the file cannot be opened or read.
        SnapshotDecodingError: If the file is corrupt or not a snapshot.
    """
    file_path = Path(path)

    try:
        data = file_path.read_bytes()
    except FileNotFoundError as e:
        raise SnapshotNotFoundError(file_path) from e
    except OSError as e:
        raise SnapshotIOError(
            f"Could not read snapshot from {file_path}: {e.strerror or e}",
            path=file_path,
        ) from e

    snapshot = decode_snapshot(data, path=file_path)
    logger.info("Snapshot loaded", path=str(file_path), variables=len(snapshot))
    return snapshot
