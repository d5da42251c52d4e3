"""Internal components for git operations - not part of public API."""

from diffmark.git._internal.access import RepoAccess
from diffmark.git._internal.parsing import (
    StatusEntry,
    make_branch_ref,
    make_remote_ref,
    parse_porcelain_z,
    porcelain_kind,
    validate_ref,
)
from diffmark.git._internal.patches import (
    SYMLINK_MODE,
    count_content_lines,
    synthesize_added_patch,
)
from diffmark.git._internal.runner import GitRunner

__all__ = [
    "SYMLINK_MODE",
    "GitRunner",
    "RepoAccess",
    "StatusEntry",
    "count_content_lines",
    "make_branch_ref",
    "make_remote_ref",
    "parse_porcelain_z",
    "porcelain_kind",
    "synthesize_added_patch",
    "validate_ref",
]
