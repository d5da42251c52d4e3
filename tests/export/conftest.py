"""Test fixtures for export module."""

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
def persister() -> MemoryPersister:
    return MemoryPersister()


@pytest.fixture
def populated_store(persister: MemoryPersister, repo_dir: str) -> ReviewStateStore:
    """Two scopes: one resolved and one open comment, one dismissed and one active note."""
    store = ReviewStateStore(persister)
    first = ScopeKey.of(repo_dir, "feature", "aaa")
    second = ScopeKey.of(repo_dir, "feature", "bbb")
    done = store.add_comment(first, "a.py", line_number=1, text="done", author="alice")
    store.add_comment(second, "b.py", text="open")
    store.resolve_comment(repo_dir, done.id, "bob")
    stale = store.add_note(first, "a.py", text="stale", author="agent")
    store.add_note(second, "b.py", text="active", author="agent")
    store.dismiss_note(repo_dir, stale.id, "alice")
    return store
