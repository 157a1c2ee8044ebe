"""
Pytest fixtures for the snapmatch tests.
"""

from pathlib import Path

import pytest

from snapmatch.domain.constants import SNAPSHOTS_ENV
from snapmatch.golden.assertion import CI_INDICATORS
from snapmatch.golden.redactions import Redactions

# =============================================================================
# Environment Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clean_snapshot_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's SNAPSHOTS setting out of the tests."""
    monkeypatch.delenv(SNAPSHOTS_ENV, raising=False)


@pytest.fixture
def no_ci(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the tests run outside CI."""
    for indicator in CI_INDICATORS:
        monkeypatch.delenv(indicator, raising=False)


@pytest.fixture
def in_ci(no_ci: None, monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the tests run under GitHub Actions."""
    monkeypatch.setenv("GITHUB_ACTIONS", "true")


# =============================================================================
# Redaction Fixtures
# =============================================================================

@pytest.fixture
def redactions() -> Redactions:
    """Empty registry."""
    return Redactions()


@pytest.fixture
def sandbox_redactions(tmp_path: Path) -> Redactions:
    """Registry with `[ROOT]` bound to a sandbox directory."""
    registry = Redactions()
    registry.insert("[ROOT]", tmp_path / "sandbox")
    return registry


# =============================================================================
# Snapshot File Fixtures
# =============================================================================

@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    """Directory holding recorded snapshots."""
    path = tmp_path / "snapshots"
    path.mkdir()
    return path
