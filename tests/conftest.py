"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from aftercare.models.cleanup import CleanupConfig


def write(root: Path, relative: str, text: str = "") -> Path:
    """Create a file (and its parents) below *root*."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def session(tmp_path, monkeypatch):
    """A session root with an empty backend/src tree."""
    root = tmp_path / "workspace"
    (root / "backend" / "src").mkdir(parents=True)
    monkeypatch.setenv("CLAUDE_PROJECT_DIR", str(root))
    monkeypatch.delenv("DEBUG", raising=False)
    return root


@pytest.fixture
def plain_config():
    """Cleanup config without exclusions, so only the rules decide."""
    return CleanupConfig(
        exclude_paths=(),
        exclude_patterns=(),
        exclude_recent_files=False,
        scan_paths=("backend/src",),
    )
