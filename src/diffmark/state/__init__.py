"""Review state: viewed marks, comments, and notes per (repo, branch, commit)."""

from diffmark.state.errors import CommentNotFoundError, NoteNotFoundError, StateError
from diffmark.state.models import (
    BranchRecord,
    Comment,
    CommitRecord,
    Note,
    RepoRecord,
    ScopeKey,
    StateDocument,
    normalize_repo_path,
)
from diffmark.state.persistence import (
    STATE_FILE_NAME,
    JsonFilePersister,
    MemoryPersister,
    StatePersister,
)
from diffmark.state.store import ReviewStateStore, filter_comments, filter_notes
from diffmark.state.factory import open_store

__all__ = [
    # Store
    "ReviewStateStore",
    "open_store",
    "filter_comments",
    "filter_notes",
    # Models
    "ScopeKey",
    "Comment",
    "Note",
    "CommitRecord",
    "BranchRecord",
    "RepoRecord",
    "StateDocument",
    "normalize_repo_path",
    # Persistence
    "StatePersister",
    "JsonFilePersister",
    "MemoryPersister",
    "STATE_FILE_NAME",
    # Errors
    "StateError",
    "CommentNotFoundError",
    "NoteNotFoundError",
]
