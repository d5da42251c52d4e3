"""Blob content from a commit, the index, or the working tree.

Large-file-storage pointers are resolved through the local smudge filter
when possible. A failed smudge degrades to the pointer bytes so callers
always get something to display.
"""

from __future__ import annotations

import os
import shutil
from enum import StrEnum
from pathlib import Path

import structlog

from diffmark.git._internal import GitRunner, validate_ref
from diffmark.git.errors import (
    BlobUnreadableError,
    GitOperationError,
    LFSUnavailableError,
    PathEscapesRepositoryError,
)

log = structlog.get_logger(__name__)

LFS_POINTER_SIGNATURE = b"version https://git-lfs.github.com/spec/v1"
LFS_POINTER_MAX_SIZE = 500

_IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}


class BlobSource(StrEnum):
    """Where blob content is read from."""

    COMMIT = "commit"
    INDEX = "index"
    WORKTREE = "worktree"


def is_lfs_pointer(content: bytes) -> bool:
    """True for small buffers that start with the LFS pointer signature."""
    if len(content) > LFS_POINTER_MAX_SIZE:
        return False
    return content.startswith(LFS_POINTER_SIGNATURE)


def mime_type_for(path: str) -> str:
    return _IMAGE_MIME_TYPES.get(Path(path).suffix.lower(), "application/octet-stream")


def is_image_path(path: str) -> bool:
    return Path(path).suffix.lower() in _IMAGE_MIME_TYPES


def resolve_in_repo(repo_root: Path, user_path: str) -> Path:
    """Resolve user_path against repo_root, rejecting anything outside it.

    Raises:
        PathEscapesRepositoryError: If the resolved path is not inside repo_root.
    """
    resolved_root = repo_root.resolve()
    full_path = (resolved_root / user_path).resolve()
    if not full_path.is_relative_to(resolved_root):
        raise PathEscapesRepositoryError(user_path, str(resolved_root))
    return full_path


class BlobReader:
    """Reads file content at one of three repository layers."""

    def __init__(self, repo_root: Path, runner: GitRunner, *, lfs_smudge: bool = True) -> None:
        self._root = repo_root
        self._runner = runner
        self._lfs_smudge = lfs_smudge

    def read_blob(self, source: BlobSource | str, path: str, ref: str = "HEAD") -> bytes:
        """Dispatch on source. `ref` applies only to commit reads."""
        source = BlobSource(source)
        if source is BlobSource.COMMIT:
            return self.read_commit(ref, path)
        if source is BlobSource.INDEX:
            return self.read_index(path)
        return self.read_worktree(path)

    def read_commit(self, ref: str, path: str) -> bytes:
        validate_ref(ref)
        try:
            content = self._runner.run(["show", f"{ref}:{path}"])
        except GitOperationError as e:
            raise BlobUnreadableError(f"commit {ref}", path, e.detail) from e
        return self._maybe_smudge(content, path)

    def read_index(self, path: str) -> bytes:
        try:
            content = self._runner.run(["show", f":{path}"])
        except GitOperationError as e:
            raise BlobUnreadableError("index", path, e.detail) from e
        return self._maybe_smudge(content, path)

    def read_worktree(self, path: str) -> bytes:
        full_path = resolve_in_repo(self._root, path)
        try:
            content = full_path.read_bytes()
        except OSError as e:
            raise BlobUnreadableError("worktree", path, e.strerror or str(e)) from e
        # Checked-out files are normally smudged already; a hand-made pointer is not.
        return self._maybe_smudge(content, path)

    def read_link(self, path: str) -> str | None:
        """Target of a worktree symlink, which git stores as the blob content.

        Returns None when the path is not a symlink. The link itself must sit
        inside the repository; its target may point anywhere.
        """
        link = resolve_in_repo(self._root, str(Path(path).parent)) / Path(path).name
        if not link.is_symlink():
            return None
        try:
            return os.readlink(link)
        except OSError as e:
            raise BlobUnreadableError("worktree", path, e.strerror or str(e)) from e

    def smudge_lfs(self, pointer: bytes, path: str) -> bytes:
        """Run the LFS smudge filter over a pointer.

        Raises:
            LFSUnavailableError: git-lfs is not installed or the filter failed.
        """
        if shutil.which("git-lfs") is None:
            raise LFSUnavailableError("git-lfs is not installed")
        try:
            return self._runner.run(["lfs", "smudge", path], stdin=pointer)
        except GitOperationError as e:
            raise LFSUnavailableError(e.detail) from e

    def _maybe_smudge(self, content: bytes, path: str) -> bytes:
        if not self._lfs_smudge or not is_lfs_pointer(content):
            return content
        try:
            return self.smudge_lfs(content, path)
        except LFSUnavailableError as e:
            log.info("lfs_smudge_skipped", path=path, reason=e.reason)
            return content
