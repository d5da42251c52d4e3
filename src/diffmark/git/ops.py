"""Repository facade for the HTTP and CLI layers - returns serializable data models."""

from __future__ import annotations

from pathlib import Path

import pygit2

from diffmark.config.models import DiffmarkConfig
from diffmark.git._internal import GitRunner, RepoAccess
from diffmark.git._internal.runner import DEFAULT_TIMEOUT_SEC
from diffmark.git.blob import BlobReader, BlobSource
from diffmark.git.diff import DiffEngine
from diffmark.git.models import DiffResult, FileChange, RepositorySnapshot


class GitOps:
    """Diff and blob access for one repository, discovered from any path inside it."""

    def __init__(
        self,
        repo_path: Path | str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        lfs_smudge: bool = True,
        default_base_branch: str = "main",
    ) -> None:
        self._access = RepoAccess(repo_path)
        self._default_base = default_base_branch
        self._runner = GitRunner(self._access.path, timeout_sec)
        self._blobs = BlobReader(self._access.path, self._runner, lfs_smudge=lfs_smudge)
        self._engine = DiffEngine(self._access, self._runner, self._blobs)

    @classmethod
    def from_config(cls, repo_path: Path | str, config: DiffmarkConfig) -> GitOps:
        """GitOps using the `git` and `review` sections of config."""
        return cls(
            repo_path,
            timeout_sec=config.git.timeout_sec,
            lfs_smudge=config.git.lfs_smudge,
            default_base_branch=config.review.base_branch,
        )

    @property
    def repo(self) -> pygit2.Repository:
        """
        Direct access to underlying pygit2 Repository.

        Escape hatch for advanced consumers. Bypasses GitOps error mapping
        and domain model conversion. Use with caution.
        """
        return self._access.repo

    @property
    def path(self) -> Path:
        """Repository root path (absolute)."""
        return self._access.path

    @property
    def blobs(self) -> BlobReader:
        return self._blobs

    # =========================================================================
    # Repository Facts
    # =========================================================================

    def current_branch(self) -> str:
        """Current branch name, or "HEAD" if detached."""
        return self._access.current_branch_name()

    def current_commit(self) -> str:
        return str(self._access.must_head_commit().id)

    def remote_url(self) -> str | None:
        """URL of the origin remote, or None."""
        return self._access.remote_url()

    def snapshot(self) -> RepositorySnapshot:
        """Path, branch, commit, and remote URL as of now."""
        return RepositorySnapshot(
            repo_path=str(self.path),
            branch=self.current_branch(),
            commit=self.current_commit(),
            remote_url=self.remote_url(),
        )

    # =========================================================================
    # Diffs
    # =========================================================================

    def committed_diff(self, base_branch: str | None = None) -> DiffResult:
        """Changes on HEAD since it branched from `base_branch` (default from config)."""
        return self._engine.committed_diff(base_branch or self._default_base)

    def uncommitted_changes(self) -> list[FileChange]:
        """Staged, unstaged, and untracked changes."""
        return self._engine.uncommitted_changes()

    # =========================================================================
    # Blobs
    # =========================================================================

    def read_blob(self, source: BlobSource | str, path: str, ref: str = "HEAD") -> bytes:
        return self._blobs.read_blob(source, path, ref)

    def read_blob_commit(self, ref: str, path: str) -> bytes:
        return self._blobs.read_commit(ref, path)

    def read_blob_index(self, path: str) -> bytes:
        return self._blobs.read_index(path)

    def read_blob_worktree(self, path: str) -> bytes:
        return self._blobs.read_worktree(path)
