"""
Root conftest.py for serenv tests.

Provides shared fixtures:
- Snapshot builders
- A temporary snapshot path
- Isolation of SERENV_* settings variables
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from serenv.env.snapshot import EnvironmentSnapshot

# =============================================================================
# Environment fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_serenv_settings(monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's SERENV_* variables out of tests."""
    for name in ("SERENV_SNAPSHOT_PATH", "SERENV_LOG_LEVEL", "SERENV_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    yield
    # The CLI installs a handler on the serenv logger; drop it between tests.
    root = logging.getLogger("serenv")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


# =============================================================================
# Snapshot fixtures
# =============================================================================


@pytest.fixture
def make_snapshot():
    """Build an EnvironmentSnapshot from str or bytes pairs."""

    def _make(**variables: str | bytes) -> EnvironmentSnapshot:
        return EnvironmentSnapshot.from_mapping(variables)

    return _make


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """Path for a snapshot file inside a temporary directory."""
    return tmp_path / ".serenv.dat"
