"""String parsing helpers for git ref names and porcelain status output."""

from __future__ import annotations

import re
from dataclasses import dataclass

from diffmark.git.errors import InvalidRefError
from diffmark.git.models import ChangeKind

_REFS_HEADS_PREFIX = "refs/heads/"
_REFS_REMOTES_PREFIX = "refs/remotes/"

_VALID_REF = re.compile(r"^[A-Za-z0-9._\-/]+$")
_MAX_REF_LENGTH = 256

UNTRACKED = "?"
UNMODIFIED = " "


def make_branch_ref(name: str) -> str:
    """Create full branch ref from name."""
    return f"{_REFS_HEADS_PREFIX}{name}"


def make_remote_ref(remote: str, name: str) -> str:
    """Create full remote-tracking ref (e.g., 'origin', 'main' -> 'refs/remotes/origin/main')."""
    return f"{_REFS_REMOTES_PREFIX}{remote}/{name}"


def validate_ref(ref: str) -> str:
    """Reject refs that are empty, oversized, or could be read as options or traversal."""
    if not ref:
        raise InvalidRefError(ref, "ref cannot be empty")
    if len(ref) > _MAX_REF_LENGTH:
        raise InvalidRefError(ref, "ref too long")
    if not _VALID_REF.match(ref):
        raise InvalidRefError(ref, "ref contains invalid characters")
    if ".." in ref:
        raise InvalidRefError(ref, "ref cannot contain '..'")
    if ref.startswith("-"):
        raise InvalidRefError(ref, "ref cannot start with '-'")
    return ref


def porcelain_kind(code: str) -> ChangeKind:
    """Map a porcelain status letter to a change kind."""
    if code in ("A", "C"):
        return ChangeKind.ADDED
    if code == "D":
        return ChangeKind.DELETED
    if code == "R":
        return ChangeKind.RENAMED
    return ChangeKind.MODIFIED


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One line of `git status --porcelain=v1 -z`."""

    index: str  # X column: index vs HEAD
    worktree: str  # Y column: worktree vs index
    path: str
    orig_path: str | None = None

    @property
    def is_untracked(self) -> bool:
        return self.index == UNTRACKED and self.worktree == UNTRACKED

    @property
    def has_staged(self) -> bool:
        return self.index not in (UNMODIFIED, UNTRACKED)

    @property
    def has_unstaged(self) -> bool:
        return self.worktree not in (UNMODIFIED, UNTRACKED)


def parse_porcelain_z(output: str) -> list[StatusEntry]:
    """Parse NUL-separated porcelain v1 output.

    Rename and copy entries carry the source path as the following token.
    """
    tokens = output.split("\0")
    entries: list[StatusEntry] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        x, y, path = token[0], token[1], token[3:]
        orig_path = None
        if x in ("R", "C") or y in ("R", "C"):
            if i < len(tokens):
                orig_path = tokens[i] or None
                i += 1
        entries.append(StatusEntry(x, y, path, orig_path))
    return entries
