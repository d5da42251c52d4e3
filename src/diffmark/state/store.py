"""Scoped review-state store: viewed marks, comments, and agent notes.

All state lives in one in-memory StateDocument guarded by a single lock.
Every mutation persists the full document synchronously before returning,
then hands it to the optional save hook (normally the exporter). A mutation
whose save fails is rolled back in memory.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import structlog

from diffmark.core.errors import InternalError
from diffmark.state.errors import CommentNotFoundError, NoteNotFoundError
from diffmark.state.models import (
    Comment,
    CommitRecord,
    Note,
    ScopeKey,
    StateDocument,
    normalize_repo_path,
)
from diffmark.state.persistence import StatePersister

log = structlog.get_logger(__name__)

SaveHook = Callable[[StateDocument, str], None]

_Annotation = TypeVar("_Annotation", Comment, Note)


class _IdIndex:
    """(repo_path, id) -> scopes holding an annotation with that id.

    Ids are only unique within a scope, so one id may map to several scopes.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], list[ScopeKey]] = {}

    def add(self, scope: ScopeKey, annotation_id: str) -> None:
        scopes = self._entries.setdefault((scope.repo_path, annotation_id), [])
        if scope not in scopes:
            scopes.append(scope)

    def lookup(self, repo_path: str, annotation_id: str) -> list[ScopeKey]:
        return list(self._entries.get((repo_path, annotation_id), ()))


class ReviewStateStore:
    """Thread-safe store for per-scope review annotations.

    Args:
        persister: Loads the document once at construction and saves it
            after every mutation.
        on_save: Called with (document, repo_path) after each successful
            save. Failures are logged and never propagate.
    """

    def __init__(self, persister: StatePersister, on_save: SaveHook | None = None) -> None:
        self._persister = persister
        self._on_save = on_save
        self._lock = threading.RLock()
        self._document = persister.load()
        self._comment_index = _IdIndex()
        self._note_index = _IdIndex()
        self._rebuild_indexes()

    # =========================================================================
    # Comments
    # =========================================================================

    def add_comment(
        self,
        scope: ScopeKey,
        file_path: str,
        line_number: int | None = None,
        text: str = "",
        author: str = "",
        type: str = "",
        parent_id: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> Comment:
        with self._mutation(scope.repo_path):
            record = self._document.ensure(scope)
            now = int(time.time())
            comment = Comment(
                id=f"{now}-{len(record.comments)}",
                file_path=file_path,
                line_number=line_number,
                text=text,
                author=author,
                type=type,
                parent_id=parent_id,
                metadata=dict(metadata) if metadata else None,
                timestamp=now,
                branch=scope.branch,
                commit=scope.commit,
            )
            record.comments.append(comment)
            self._comment_index.add(scope, comment.id)
        log.debug("comment_added", repo=scope.repo_path, comment_id=comment.id)
        return comment.model_copy(deep=True)

    def get_comments(self, scope: ScopeKey, file_path: str | None = None) -> list[Comment]:
        with self._lock:
            record = self._document.find(scope)
            if record is None:
                return []
            return _copies(c for c in record.comments if file_path is None or c.file_path == file_path)

    def get_all_comments(self, repo_path: str) -> list[Comment]:
        """Comments of every branch and commit of one repository."""
        with self._lock:
            key = normalize_repo_path(repo_path)
            return _copies(c for _, record in self._document.iter_scopes(key) for c in record.comments)

    def resolve_comment(self, repo_path: str, comment_id: str, resolved_by: str) -> Comment:
        """Mark a comment resolved. Re-resolving overwrites resolver and time."""
        with self._lock:
            key = normalize_repo_path(repo_path)
            comment = self._locate(
                self._comment_index, key, comment_id, lambda r: r.comments, "comment"
            )
            if comment is None:
                raise CommentNotFoundError(key, comment_id)
            with self._mutation(key):
                comment.resolved = True
                comment.resolved_by = resolved_by
                comment.resolved_at = int(time.time())
            log.debug("comment_resolved", repo=key, comment_id=comment_id)
            return comment.model_copy(deep=True)

    # =========================================================================
    # Notes
    # =========================================================================

    def add_note(
        self,
        scope: ScopeKey,
        file_path: str,
        line_number: int | None = None,
        text: str = "",
        author: str = "",
        type: str = "",
        parent_id: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> Note:
        if not author:
            raise ValueError("note author is required")
        with self._mutation(scope.repo_path):
            record = self._document.ensure(scope)
            now = int(time.time())
            note = Note(
                id=f"{now}-{len(record.notes)}",
                file_path=file_path,
                line_number=line_number,
                text=text,
                author=author,
                type=type,
                parent_id=parent_id,
                metadata=dict(metadata) if metadata else None,
                timestamp=now,
                branch=scope.branch,
                commit=scope.commit,
            )
            record.notes.append(note)
            self._note_index.add(scope, note.id)
        log.debug("note_added", repo=scope.repo_path, note_id=note.id, author=author)
        return note.model_copy(deep=True)

    def get_notes(self, scope: ScopeKey, file_path: str | None = None) -> list[Note]:
        with self._lock:
            record = self._document.find(scope)
            if record is None:
                return []
            return _copies(n for n in record.notes if file_path is None or n.file_path == file_path)

    def get_all_notes(self, repo_path: str) -> list[Note]:
        with self._lock:
            key = normalize_repo_path(repo_path)
            return _copies(n for _, record in self._document.iter_scopes(key) for n in record.notes)

    def dismiss_note(self, repo_path: str, note_id: str, dismissed_by: str) -> Note:
        with self._lock:
            key = normalize_repo_path(repo_path)
            note = self._locate(self._note_index, key, note_id, lambda r: r.notes, "note")
            if note is None:
                raise NoteNotFoundError(key, note_id)
            with self._mutation(key):
                note.dismissed = True
                note.dismissed_by = dismissed_by
                note.dismissed_at = int(time.time())
            log.debug("note_dismissed", repo=key, note_id=note_id)
            return note.model_copy(deep=True)

    # =========================================================================
    # Viewed files
    # =========================================================================

    def is_file_viewed(self, scope: ScopeKey, file_path: str) -> bool:
        with self._lock:
            record = self._document.find(scope)
            return record is not None and file_path in record.viewed_files

    def mark_file_viewed(self, scope: ScopeKey, file_path: str) -> None:
        with self._mutation(scope.repo_path):
            record = self._document.ensure(scope)
            if file_path not in record.viewed_files:
                record.viewed_files.append(file_path)

    def unmark_file_viewed(self, scope: ScopeKey, file_path: str) -> None:
        with self._mutation(scope.repo_path):
            record = self._document.find(scope)
            if record is not None and file_path in record.viewed_files:
                record.viewed_files.remove(file_path)

    def get_viewed_files(self, scope: ScopeKey) -> list[str]:
        with self._lock:
            record = self._document.find(scope)
            return list(record.viewed_files) if record is not None else []

    # =========================================================================
    # Internals
    # =========================================================================

    def _rebuild_indexes(self) -> None:
        self._comment_index = _IdIndex()
        self._note_index = _IdIndex()
        for repo_path in self._document.repos:
            for scope, record in self._document.iter_scopes(repo_path):
                for comment in record.comments:
                    self._comment_index.add(scope, comment.id)
                for note in record.notes:
                    self._note_index.add(scope, note.id)

    def _locate(
        self,
        index: _IdIndex,
        repo_path: str,
        annotation_id: str,
        items: Callable[[CommitRecord], list[_Annotation]],
        kind: str,
    ) -> _Annotation | None:
        scopes = index.lookup(repo_path, annotation_id)
        if not scopes:
            return None
        if len(scopes) > 1:
            log.warning(
                "annotation_id_ambiguous",
                kind=kind,
                repo=repo_path,
                annotation_id=annotation_id,
                scopes=len(scopes),
            )
        scope = scopes[0]
        record = self._document.find(scope)
        if record is None:
            raise InternalError.unexpected(
                f"{kind} index points at missing scope {scope.branch}@{scope.commit}"
            )
        for item in items(record):
            if item.id == annotation_id:
                return item
        raise InternalError.unexpected(f"{kind} {annotation_id} missing from indexed scope")

    @contextmanager
    def _mutation(self, repo_path: str) -> Iterator[None]:
        """Hold the lock, apply the block's changes, then save.

        If the block or the save raises, the document and indexes are put
        back as they were, so a failed call leaves no trace in memory.
        """
        with self._lock:
            snapshot = self._document.model_copy(deep=True)
            try:
                yield
                self._persister.save(self._document)
            except BaseException:
                self._document = snapshot
                self._rebuild_indexes()
                raise
            self._notify(repo_path)

    def _notify(self, repo_path: str) -> None:
        if self._on_save is None:
            return
        try:
            self._on_save(self._document, repo_path)
        except Exception as e:
            log.warning("save_hook_failed", repo=repo_path, error=str(e))


def _copies(items: Iterable[_Annotation]) -> list[_Annotation]:
    return [item.model_copy(deep=True) for item in items]


def filter_comments(
    comments: Iterable[Comment],
    resolved: bool | None = None,
    file_path: str | None = None,
) -> list[Comment]:
    """Subset by resolution state and/or file. ``None`` means no constraint."""
    return [
        c
        for c in comments
        if (resolved is None or c.resolved == resolved)
        and (file_path is None or c.file_path == file_path)
    ]


def filter_notes(
    notes: Iterable[Note],
    dismissed: bool | None = None,
    file_path: str | None = None,
) -> list[Note]:
    return [
        n
        for n in notes
        if (dismissed is None or n.dismissed == dismissed)
        and (file_path is None or n.file_path == file_path)
    ]
