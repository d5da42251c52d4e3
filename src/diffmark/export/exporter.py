"""Per-repository JSON export of comments and notes.

Each repository in state gets ``<base>/<digest>/comments_export.json`` where
``digest`` is the first 16 hex characters of sha256(repo_path). External
tools read these files; they are rewritten after every state save.
"""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from diffmark.core.atomic import write_json_atomic
from diffmark.state.models import Comment, Note, StateDocument, normalize_repo_path

log = structlog.get_logger(__name__)

EXPORT_FILE_NAME = "comments_export.json"


def export_path_for_repo(repo_path: str, base: Path) -> Path:
    digest = hashlib.sha256(repo_path.encode("utf-8")).hexdigest()[:16]
    return base / digest / EXPORT_FILE_NAME


def load_export(path: Path) -> dict[str, Any]:
    """Read an export file back. Raises OSError or ValueError on bad input."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"export is not a JSON object: {path}")
    return data


def build_payload(
    repo_path: str,
    comments: list[Comment],
    notes: list[Note],
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    generated = (now or datetime.now(UTC)).astimezone(UTC)
    return {
        "generated_at": generated.isoformat(timespec="seconds").replace("+00:00", "Z"),
        "repo_path": repo_path,
        "comments": [c.model_dump(mode="json", exclude_none=True) for c in comments],
        "notes": [n.model_dump(mode="json", exclude_none=True) for n in notes],
        "summary": {
            "total_comments": len(comments),
            "unresolved_comments": sum(1 for c in comments if not c.resolved),
            "total_notes": len(notes),
            "active_notes": sum(1 for n in notes if not n.dismissed),
        },
    }


class Exporter:
    """Writes export files under ``base_dir``.

    Usable directly as the store's save hook: ``Exporter.export_repo`` takes
    ``(document, repo_path)``. Failures are logged, never raised, so a broken
    export directory cannot fail a state mutation.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, repo_path: str) -> Path:
        return export_path_for_repo(normalize_repo_path(repo_path), self._base_dir)

    def export_repo(self, document: StateDocument, repo_path: str) -> Path | None:
        """Write the export for one repository. Returns the path, or None on failure."""
        key = normalize_repo_path(repo_path)
        comments: list[Comment] = []
        notes: list[Note] = []
        for _, record in document.iter_scopes(key):
            comments.extend(record.comments)
            notes.extend(record.notes)

        path = export_path_for_repo(key, self._base_dir)
        try:
            write_json_atomic(path, build_payload(key, comments, notes))
        except OSError as e:
            log.warning("export_failed", repo=key, path=str(path), error=str(e))
            return None
        log.debug("export_written", repo=key, path=str(path), comments=len(comments))
        return path

    def export_document(self, document: StateDocument) -> list[Path]:
        """Export every repository present in state."""
        written = []
        for repo_path in document.repos:
            path = self.export_repo(document, repo_path)
            if path is not None:
                written.append(path)
        return written
