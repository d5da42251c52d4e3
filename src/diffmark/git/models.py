"""Serializable data models for diff computation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import pygit2


class ChangeKind(StrEnum):
    """What happened to a file between two states."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"


class StagingStatus(StrEnum):
    """Which layer a change lives in."""

    COMMITTED = "committed"
    STAGED = "staged"
    UNSTAGED = "unstaged"


def classify_change(from_path: str | None, to_path: str | None) -> ChangeKind:
    """Classify a tree change by its endpoints."""
    if not from_path:
        return ChangeKind.ADDED
    if not to_path:
        return ChangeKind.DELETED
    if from_path != to_path:
        return ChangeKind.RENAMED
    return ChangeKind.MODIFIED


def count_patch_lines(patch: str) -> tuple[int, int]:
    """Count (additions, deletions) in a unified diff, skipping ---/+++ headers."""
    additions = 0
    deletions = 0
    for line in patch.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            additions += 1
        elif line.startswith("-") and not line.startswith("---"):
            deletions += 1
    return additions, deletions


@dataclass(frozen=True, slots=True)
class RepositorySnapshot:
    """Where the repository is right now. Derived on demand, never persisted."""

    repo_path: str
    branch: str  # "HEAD" when detached
    commit: str
    remote_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo_path": self.repo_path,
            "branch": self.branch,
            "commit": self.commit,
            "remote_url": self.remote_url,
        }


@dataclass(frozen=True, slots=True)
class FileChange:
    """Single file change in one layer (committed, staged, or unstaged)."""

    path: str
    kind: ChangeKind
    staging: StagingStatus
    additions: int
    deletions: int
    patch: str
    prior_path: str | None = None

    @classmethod
    def from_patch(
        cls,
        patch: pygit2.Patch,
        staging: StagingStatus = StagingStatus.COMMITTED,
    ) -> FileChange:
        delta = patch.delta
        from_path: str | None = delta.old_file.path
        to_path: str | None = delta.new_file.path
        if delta.status == pygit2.GIT_DELTA_ADDED:
            from_path = None
        elif delta.status == pygit2.GIT_DELTA_DELETED:
            to_path = None

        text = patch.text or ""
        additions, deletions = count_patch_lines(text)
        kind = classify_change(from_path, to_path)
        return cls(
            path=to_path or from_path or "",
            kind=kind,
            staging=staging,
            additions=additions,
            deletions=deletions,
            patch=text,
            prior_path=from_path if kind in (ChangeKind.RENAMED, ChangeKind.DELETED) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "prior_path": self.prior_path,
            "status": self.kind.value,
            "staging_status": self.staging.value,
            "additions": self.additions,
            "deletions": self.deletions,
            "patch": self.patch,
        }


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Committed diff between a resolved base and HEAD."""

    base_commit: str
    head_commit: str
    files: tuple[FileChange, ...]

    @property
    def total_additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_commit": self.base_commit,
            "head_commit": self.head_commit,
            "files": [f.to_dict() for f in self.files],
        }
