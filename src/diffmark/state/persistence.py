"""Persistence strategies for the review-state store.

The store receives one of these at construction and calls ``save`` with the
full document after every mutation.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import ValidationError

from diffmark.core.atomic import write_json_atomic
from diffmark.core.errors import StorageError
from diffmark.state.models import StateDocument

log = structlog.get_logger(__name__)

STATE_FILE_NAME = "viewed.json"


class StatePersister(Protocol):
    """Loads and saves the whole state document."""

    def load(self) -> StateDocument: ...

    def save(self, document: StateDocument) -> None: ...


class JsonFilePersister:
    """Pretty-printed JSON file, replaced atomically on each save.

    A file that cannot be parsed is moved aside (``<name>.corrupt-<ts>``) and
    loading continues from empty state, so the next save cannot overwrite it.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StateDocument:
        if not self._path.exists():
            return StateDocument()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError.read_failed(str(self._path), str(e)) from e
        try:
            return StateDocument.model_validate_json(raw) if raw.strip() else StateDocument()
        except ValidationError as e:
            backup = self._quarantine()
            log.warning(
                "state_file_corrupt",
                path=str(self._path),
                backup=str(backup),
                errors=e.error_count(),
            )
            return StateDocument()

    def save(self, document: StateDocument) -> None:
        try:
            write_json_atomic(self._path, document.to_json_dict(), fsync=True)
        except OSError as e:
            raise StorageError.write_failed(str(self._path), str(e)) from e
        log.debug("state_saved", path=str(self._path))

    def _quarantine(self) -> Path:
        backup = self._path.with_name(f"{self._path.name}.corrupt-{int(time.time())}")
        try:
            os.replace(self._path, backup)
        except OSError as e:
            raise StorageError.read_failed(str(self._path), f"cannot move corrupt file: {e}") from e
        return backup


class MemoryPersister:
    """Keeps the last saved document in memory. For tests and ephemeral stores."""

    def __init__(self, document: StateDocument | None = None) -> None:
        self._document = document.model_copy(deep=True) if document else StateDocument()
        self.save_count = 0

    @property
    def document(self) -> StateDocument:
        return self._document

    def load(self) -> StateDocument:
        return self._document.model_copy(deep=True)

    def save(self, document: StateDocument) -> None:
        self._document = document.model_copy(deep=True)
        self.save_count += 1
