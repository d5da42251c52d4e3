"""Git diff and blob access."""

from diffmark.git.errors import (
    BlobUnreadableError,
    GitError,
    GitOperationError,
    InvalidRefError,
    LFSUnavailableError,
    NoHeadCommitError,
    NoMergeBaseError,
    NotARepositoryError,
    PathEscapesRepositoryError,
    RefNotFoundError,
)
from diffmark.git.models import (
    ChangeKind,
    DiffResult,
    FileChange,
    RepositorySnapshot,
    StagingStatus,
)
from diffmark.git.blob import (
    BlobReader,
    BlobSource,
    is_image_path,
    is_lfs_pointer,
    mime_type_for,
)
from diffmark.git.diff import DiffEngine
from diffmark.git.ops import GitOps

__all__ = [
    # Main class
    "GitOps",
    "DiffEngine",
    "BlobReader",
    "BlobSource",
    # Models
    "ChangeKind",
    "DiffResult",
    "FileChange",
    "RepositorySnapshot",
    "StagingStatus",
    # Helpers
    "is_image_path",
    "is_lfs_pointer",
    "mime_type_for",
    # Errors
    "GitError",
    "NotARepositoryError",
    "RefNotFoundError",
    "InvalidRefError",
    "NoHeadCommitError",
    "NoMergeBaseError",
    "GitOperationError",
    "BlobUnreadableError",
    "PathEscapesRepositoryError",
    "LFSUnavailableError",
]
