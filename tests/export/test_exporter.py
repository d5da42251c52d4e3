"""Tests for the comment/note exporter."""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime
from pathlib import Path

import pytest

from diffmark.export import (
    EXPORT_FILE_NAME,
    Exporter,
    build_payload,
    export_path_for_repo,
    load_export,
)
from diffmark.state import MemoryPersister, ReviewStateStore, ScopeKey, StateDocument


class TestExportPath:
    def test_layout(self, tmp_path: Path) -> None:
        digest = hashlib.sha256(b"/home/me/project").hexdigest()[:16]
        path = export_path_for_repo("/home/me/project", tmp_path)
        assert path == tmp_path / digest / EXPORT_FILE_NAME
        assert len(path.parent.name) == 16

    def test_distinct_repos_distinct_paths(self, tmp_path: Path) -> None:
        assert export_path_for_repo("/a", tmp_path) != export_path_for_repo("/b", tmp_path)


class TestBuildPayload:
    def test_summary_counts(self, populated_store: ReviewStateStore, repo_dir: str) -> None:
        payload = build_payload(
            repo_dir,
            populated_store.get_all_comments(repo_dir),
            populated_store.get_all_notes(repo_dir),
        )
        assert payload["repo_path"] == repo_dir
        assert payload["summary"] == {
            "total_comments": 2,
            "unresolved_comments": 1,
            "total_notes": 2,
            "active_notes": 1,
        }

    def test_generated_at_is_rfc3339_utc(self) -> None:
        now = datetime(2024, 5, 1, 12, 30, 15, 999, tzinfo=UTC)
        payload = build_payload("/r", [], [], now=now)
        assert payload["generated_at"] == "2024-05-01T12:30:15Z"

    def test_empty(self) -> None:
        payload = build_payload("/r", [], [])
        assert payload["comments"] == []
        assert payload["notes"] == []
        assert payload["summary"]["total_comments"] == 0


class TestExporter:
    @pytest.mark.usefixtures("populated_store")
    def test_export_repo(self, tmp_path: Path, persister: MemoryPersister, repo_dir: str) -> None:
        exporter = Exporter(tmp_path / "exports")

        path = exporter.export_repo(persister.document, repo_dir)

        assert path == exporter.path_for(repo_dir)
        data = load_export(path)
        assert data["summary"]["unresolved_comments"] == 1
        assert {c["text"] for c in data["comments"]} == {"done", "open"}
        assert {n["text"] for n in data["notes"]} == {"stale", "active"}
        assert datetime.fromisoformat(data["generated_at"]).tzinfo is not None

    def test_export_document_writes_every_repo(self, tmp_path: Path) -> None:
        persister = MemoryPersister()
        store = ReviewStateStore(persister)
        store.add_comment(ScopeKey.of(tmp_path / "one", "main", "a"), "x.py", text="1")
        store.add_comment(ScopeKey.of(tmp_path / "two", "main", "a"), "y.py", text="2")
        exporter = Exporter(tmp_path / "exports")

        paths = exporter.export_document(persister.document)

        assert len(paths) == 2
        assert {load_export(p)["comments"][0]["text"] for p in paths} == {"1", "2"}

    def test_unknown_repo_exports_empty(self, tmp_path: Path) -> None:
        exporter = Exporter(tmp_path / "exports")
        path = exporter.export_repo(StateDocument(), str(tmp_path / "nothing"))
        assert path is not None
        assert load_export(path)["summary"]["total_comments"] == 0

    def test_failure_is_logged_not_raised(self, tmp_path: Path, repo_dir: str) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        exporter = Exporter(blocker)

        assert exporter.export_repo(StateDocument(), repo_dir) is None

    def test_as_save_hook(self, tmp_path: Path, repo_dir: str) -> None:
        exporter = Exporter(tmp_path / "exports")
        store = ReviewStateStore(MemoryPersister(), on_save=exporter.export_repo)
        scope = ScopeKey.of(repo_dir, "main", "abc")

        comment = store.add_comment(scope, "a.py", text="fix")
        assert load_export(exporter.path_for(repo_dir))["summary"]["unresolved_comments"] == 1

        store.resolve_comment(repo_dir, comment.id, "bob")
        assert load_export(exporter.path_for(repo_dir))["summary"]["unresolved_comments"] == 0


class TestLoadExport:
    def test_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "x.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            load_export(path)
