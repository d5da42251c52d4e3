"""Test fixtures for git module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import pytest

from diffmark.git import GitOps

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


def _commit_file(
    repo: pygit2.Repository,
    rel_path: str,
    content: str,
    message: str,
    ref: str = "HEAD",
) -> pygit2.Oid:
    """Write, stage, and commit one file on top of `ref`."""
    workdir = Path(repo.workdir)
    target = workdir / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    repo.index.add(rel_path)
    repo.index.write()
    tree = repo.index.write_tree()
    sig = repo.default_signature
    return repo.create_commit(ref, sig, sig, message, tree, [repo.head.target])


@pytest.fixture
def commit_file() -> Callable[..., pygit2.Oid]:
    return _commit_file


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Create a temporary git repository with initial commit."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    # Configure user
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    # Create initial commit
    (repo_path / "README.md").write_text("# Test Repo\n")
    repo.index.add("README.md")
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    repo.create_commit("refs/heads/main", sig, sig, "Initial commit", tree, [])

    # Set HEAD to main
    repo.set_head("refs/heads/main")

    yield repo


@pytest.fixture
def feature_repo(temp_repo: pygit2.Repository) -> pygit2.Repository:
    """On `feature`, one commit ahead of main that modifies README.md."""
    head_commit = temp_repo.head.peel(pygit2.Commit)
    temp_repo.branches.local.create("feature", head_commit)
    temp_repo.checkout(temp_repo.branches.local["feature"])
    _commit_file(temp_repo, "README.md", "# Test Repo\n\nFeature work.\n", "Update README")
    return temp_repo


@pytest.fixture
def diverged_repo(feature_repo: pygit2.Repository) -> pygit2.Repository:
    """Feature branch plus an unrelated commit on main after the branch point."""
    main = feature_repo.branches.local["main"]
    sig = feature_repo.default_signature
    blob = feature_repo.create_blob(b"main only\n")
    builder = feature_repo.TreeBuilder(main.peel(pygit2.Commit).tree)
    builder.insert("main.txt", blob, pygit2.GIT_FILEMODE_BLOB)
    feature_repo.create_commit(
        "refs/heads/main", sig, sig, "Commit on main", builder.write(), [main.target]
    )
    return feature_repo


@pytest.fixture
def orphan_repo(temp_repo: pygit2.Repository) -> pygit2.Repository:
    """`main` and an `orphan` branch with no common ancestor, HEAD on orphan."""
    sig = temp_repo.default_signature
    blob = temp_repo.create_blob(b"orphan\n")
    builder = temp_repo.TreeBuilder()
    builder.insert("orphan.txt", blob, pygit2.GIT_FILEMODE_BLOB)
    temp_repo.create_commit("refs/heads/orphan", sig, sig, "Orphan root", builder.write(), [])
    temp_repo.checkout(temp_repo.branches.local["orphan"])
    return temp_repo


@pytest.fixture
def repo_with_uncommitted(temp_repo: pygit2.Repository) -> pygit2.Repository:
    """Repository with uncommitted changes."""
    workdir = Path(temp_repo.workdir)

    # Staged change
    (workdir / "staged.txt").write_text("staged content\n")
    temp_repo.index.add("staged.txt")
    temp_repo.index.write()

    # Modified (unstaged)
    (workdir / "README.md").write_text("# Modified\n")

    # Untracked
    (workdir / "untracked.txt").write_text("untracked\n")

    return temp_repo


@pytest.fixture
def ops(temp_repo: pygit2.Repository) -> GitOps:
    return GitOps(temp_repo.workdir)
