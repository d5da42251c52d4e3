"""Test fixtures for review-state module."""

from __future__ import annotations

from pathlib import Path

import pytest

from diffmark.state import MemoryPersister, ReviewStateStore, ScopeKey


@pytest.fixture
def repo_dir(tmp_path: Path) -> str:
    path = tmp_path / "repo"
    path.mkdir()
    return str(path)


@pytest.fixture
def scope(repo_dir: str) -> ScopeKey:
    return ScopeKey.of(repo_dir, "feature", "c0ffee")


@pytest.fixture
def persister() -> MemoryPersister:
    return MemoryPersister()


@pytest.fixture
def store(persister: MemoryPersister) -> ReviewStateStore:
    return ReviewStateStore(persister)
