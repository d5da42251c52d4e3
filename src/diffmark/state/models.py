"""Review-state data models.

Ownership is an explicit hierarchy: StateDocument owns RepoRecord owns
BranchRecord owns CommitRecord. Records are created only by mutations, so
reading an unknown scope never leaves empty containers behind. The JSON
form is the nested map ``repos -> repo_path -> branch -> commit -> record``.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, RootModel


def normalize_repo_path(repo_path: str | os.PathLike[str]) -> str:
    """Absolute, normalized form used as the top-level key."""
    return os.path.abspath(os.fspath(repo_path))


@dataclass(frozen=True, slots=True)
class ScopeKey:
    """(repository path, branch, commit) annotation context.

    ``repo_path`` is normalized on construction, so every key built for the
    same repository compares and hashes equal.
    """

    repo_path: str
    branch: str
    commit: str

    def __post_init__(self) -> None:
        if not self.branch:
            raise ValueError("branch is required")
        if not self.commit:
            raise ValueError("commit is required")
        object.__setattr__(self, "repo_path", normalize_repo_path(self.repo_path))

    @classmethod
    def of(cls, repo_path: str | os.PathLike[str], branch: str, commit: str) -> ScopeKey:
        return cls(os.fspath(repo_path), branch, commit)


class Comment(BaseModel):
    """Human review comment, optionally threaded under a parent."""

    id: str
    file_path: str
    line_number: int | None = None
    text: str
    author: str = ""
    type: str = ""
    parent_id: str | None = None
    metadata: dict[str, str] | None = None
    timestamp: int
    branch: str
    commit: str
    resolved: bool = False
    resolved_by: str | None = None
    resolved_at: int | None = None


class Note(BaseModel):
    """Agent-authored annotation. Closed by dismissal rather than resolution."""

    id: str
    file_path: str
    line_number: int | None = None
    text: str
    author: str
    type: str = ""
    parent_id: str | None = None
    metadata: dict[str, str] | None = None
    timestamp: int
    branch: str
    commit: str
    dismissed: bool = False
    dismissed_by: str | None = None
    dismissed_at: int | None = None


class CommitRecord(BaseModel):
    """Annotations for one scope."""

    viewed_files: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)


class BranchRecord(RootModel[dict[str, CommitRecord]]):
    """Commit hash -> CommitRecord."""

    root: dict[str, CommitRecord] = Field(default_factory=dict)


class RepoRecord(RootModel[dict[str, BranchRecord]]):
    """Branch name -> BranchRecord."""

    root: dict[str, BranchRecord] = Field(default_factory=dict)


class StateDocument(BaseModel):
    """Whole persisted review state."""

    repos: dict[str, RepoRecord] = Field(default_factory=dict)

    def find(self, scope: ScopeKey) -> CommitRecord | None:
        repo = self.repos.get(scope.repo_path)
        if repo is None:
            return None
        branch = repo.root.get(scope.branch)
        if branch is None:
            return None
        return branch.root.get(scope.commit)

    def ensure(self, scope: ScopeKey) -> CommitRecord:
        repo = self.repos.setdefault(scope.repo_path, RepoRecord())
        branch = repo.root.setdefault(scope.branch, BranchRecord())
        return branch.root.setdefault(scope.commit, CommitRecord())

    def iter_scopes(self, repo_path: str) -> Iterator[tuple[ScopeKey, CommitRecord]]:
        """Every (scope, record) of one repository."""
        repo = self.repos.get(repo_path)
        if repo is None:
            return
        for branch_name, branch in repo.root.items():
            for commit, record in branch.root.items():
                yield ScopeKey(repo_path, branch_name, commit), record

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
