"""Repository access layer - owns pygit2.Repository and exposes computed facts."""

from __future__ import annotations

from pathlib import Path

import pygit2

from diffmark.git._internal.parsing import make_branch_ref, make_remote_ref
from diffmark.git.errors import (
    GitOperationError,
    NoHeadCommitError,
    NoMergeBaseError,
    NotARepositoryError,
    RefNotFoundError,
)


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._requested = Path(repo_path)
        try:
            discovered = pygit2.discover_repository(str(self._requested))
            if discovered is None:
                raise NotARepositoryError(str(self._requested))
            self._repo = pygit2.Repository(discovered)
        except pygit2.GitError as e:
            raise NotARepositoryError(str(self._requested)) from e
        if self._repo.workdir is None:
            raise NotARepositoryError(f"{self._requested} (bare repository)")

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        """Absolute, symlink-resolved working tree root."""
        return Path(self._repo.workdir).resolve()

    # =========================================================================
    # Repository State Facts
    # =========================================================================

    @property
    def is_unborn(self) -> bool:
        return self._repo.head_is_unborn

    @property
    def is_detached(self) -> bool:
        return self._repo.head_is_detached

    def head_commit(self) -> pygit2.Commit | None:
        if self.is_unborn:
            return None
        try:
            return self._repo.head.peel(pygit2.Commit)
        except (pygit2.GitError, KeyError):
            return None

    def must_head_commit(self) -> pygit2.Commit:
        commit = self.head_commit()
        if commit is None:
            raise NoHeadCommitError()
        return commit

    def current_branch_name(self) -> str:
        """Short branch name, or "HEAD" when detached."""
        if self.is_unborn:
            raise NoHeadCommitError()
        if self.is_detached:
            return "HEAD"
        return self._repo.head.shorthand

    def remote_url(self, name: str = "origin") -> str | None:
        if name not in [r.name for r in self._repo.remotes]:
            return None
        return self._repo.remotes[name].url or None

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def lookup_reference_commit(self, refname: str) -> pygit2.Commit | None:
        """Commit a full refname points at, or None if the ref does not exist."""
        if refname not in self._repo.references:
            return None
        try:
            return self._repo.references[refname].peel(pygit2.Commit)
        except pygit2.GitError as e:
            raise GitOperationError(f"resolve {refname}", str(e)) from e

    def resolve_base_commit(self, branch: str, remote: str = "origin") -> pygit2.Commit:
        """Remote-tracking ref first, then the local branch."""
        for refname in (make_remote_ref(remote, branch), make_branch_ref(branch)):
            commit = self.lookup_reference_commit(refname)
            if commit is not None:
                return commit
        raise RefNotFoundError(branch)

    def merge_base(self, left: pygit2.Oid, right: pygit2.Oid) -> pygit2.Oid:
        """Nearest common ancestor. Raises NoMergeBaseError for unrelated histories."""
        try:
            base = self._repo.merge_base(left, right)
        except pygit2.GitError as e:
            raise NoMergeBaseError(str(left), str(right)) from e
        if base is None:
            raise NoMergeBaseError(str(left), str(right))
        return base

    def get_commit(self, oid: pygit2.Oid) -> pygit2.Commit:
        obj = self._repo.get(oid)
        if not isinstance(obj, pygit2.Commit):
            raise GitOperationError("lookup commit", f"{oid} is not a commit")
        return obj

    # =========================================================================
    # Diff
    # =========================================================================

    def diff_trees(self, old: pygit2.Tree, new: pygit2.Tree) -> pygit2.Diff:
        """Tree-to-tree diff with rename detection."""
        try:
            diff = self._repo.diff(old, new)
            diff.find_similar(flags=pygit2.GIT_DIFF_FIND_RENAMES)
        except pygit2.GitError as e:
            raise GitOperationError("diff trees", str(e)) from e
        return diff
