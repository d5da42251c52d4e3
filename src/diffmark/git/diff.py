"""Canonical change lists from committed history, the index, and the working tree.

Two entry points:
- committed_diff: merge-base of HEAD and a base branch against HEAD, computed
  entirely in the object store so the result depends only on the two commits.
- uncommitted_changes: staged (index vs HEAD) and unstaged (worktree vs index)
  edits, reported per layer so a path can appear once in each.
"""

from __future__ import annotations

import structlog

from diffmark.git._internal import (
    SYMLINK_MODE,
    GitRunner,
    RepoAccess,
    StatusEntry,
    count_content_lines,
    parse_porcelain_z,
    porcelain_kind,
    synthesize_added_patch,
)
from diffmark.git.blob import BlobReader
from diffmark.git.errors import (
    BlobUnreadableError,
    NoMergeBaseError,
    PathEscapesRepositoryError,
)
from diffmark.git.models import (
    ChangeKind,
    DiffResult,
    FileChange,
    StagingStatus,
    count_patch_lines,
)

log = structlog.get_logger(__name__)

_STATUS_ARGS = ["status", "--porcelain=v1", "-z", "--untracked-files=all"]
_DIFF_ARGS = ["diff", "--no-color", "--no-ext-diff"]


class DiffEngine:
    """Computes FileChange lists for one repository."""

    def __init__(self, access: RepoAccess, runner: GitRunner, blobs: BlobReader) -> None:
        self._access = access
        self._runner = runner
        self._blobs = blobs

    # =========================================================================
    # Committed
    # =========================================================================

    def committed_diff(self, base_branch: str, remote: str = "origin") -> DiffResult:
        """Diff HEAD against its merge-base with `base_branch`.

        Raises:
            RefNotFoundError: base branch exists neither as remote-tracking nor local ref.
            NoHeadCommitError: HEAD does not resolve to a commit.
            GitOperationError: object-store failure.
        """
        base = self._access.resolve_base_commit(base_branch, remote)
        head = self._access.must_head_commit()

        try:
            merge_base = self._access.merge_base(head.id, base.id)
            base_tree = self._access.get_commit(merge_base).tree
            base_sha = str(merge_base)
        except NoMergeBaseError:
            log.warning(
                "merge_base_missing",
                base_branch=base_branch,
                base_commit=str(base.id),
                head_commit=str(head.id),
            )
            base_tree = base.tree
            base_sha = str(base.id)

        diff = self._access.diff_trees(base_tree, head.tree)
        files = tuple(FileChange.from_patch(patch) for patch in diff if patch is not None)
        log.debug(
            "committed_diff_computed",
            base_commit=base_sha,
            head_commit=str(head.id),
            files=len(files),
        )
        return DiffResult(base_commit=base_sha, head_commit=str(head.id), files=files)

    # =========================================================================
    # Uncommitted
    # =========================================================================

    def uncommitted_changes(self) -> list[FileChange]:
        """Staged, unstaged, and untracked changes in porcelain order.

        Raises:
            GitOperationError: git status or git diff failed.
        """
        entries = parse_porcelain_z(self._runner.run_text(_STATUS_ARGS))
        changes: list[FileChange] = []
        for entry in entries:
            if entry.is_untracked:
                untracked = self._untracked_change(entry.path)
                if untracked is not None:
                    changes.append(untracked)
                continue
            if entry.has_staged:
                changes.append(self._layer_change(entry, entry.index, StagingStatus.STAGED))
            if entry.has_unstaged:
                changes.append(self._layer_change(entry, entry.worktree, StagingStatus.UNSTAGED))
        log.debug("uncommitted_changes_computed", entries=len(entries), changes=len(changes))
        return changes

    def _layer_change(self, entry: StatusEntry, code: str, staging: StagingStatus) -> FileChange:
        kind = porcelain_kind(code)
        args = list(_DIFF_ARGS)
        if staging is StagingStatus.STAGED:
            args.append("--cached")

        prior_path: str | None = None
        if kind is ChangeKind.RENAMED and entry.orig_path:
            prior_path = entry.orig_path
            args += ["-M", "--", entry.orig_path, entry.path]
        else:
            args += ["--", entry.path]
        if kind is ChangeKind.DELETED:
            prior_path = entry.path

        patch = self._runner.run_text(args)
        additions, deletions = count_patch_lines(patch)
        return FileChange(
            path=entry.path,
            kind=kind,
            staging=staging,
            additions=additions,
            deletions=deletions,
            patch=patch,
            prior_path=prior_path,
        )

    def _untracked_change(self, path: str) -> FileChange | None:
        try:
            target = self._blobs.read_link(path)
            if target is None:
                content = self._blobs.read_worktree(path).decode("utf-8", errors="replace")
                patch = synthesize_added_patch(path, content)
            else:
                content = target
                patch = synthesize_added_patch(path, target, SYMLINK_MODE)
        except BlobUnreadableError as e:
            log.debug("untracked_file_skipped", path=path, reason=e.reason)
            return None
        except PathEscapesRepositoryError:
            log.warning("untracked_file_outside_repo", path=path)
            return None
        return FileChange(
            path=path,
            kind=ChangeKind.ADDED,
            staging=StagingStatus.UNSTAGED,
            additions=count_content_lines(content),
            deletions=0,
            patch=patch,
        )
