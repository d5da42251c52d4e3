"""Tests for git data models."""

from __future__ import annotations

import pytest

from diffmark.git.models import (
    ChangeKind,
    DiffResult,
    FileChange,
    StagingStatus,
    classify_change,
)


class TestClassifyChange:
    @pytest.mark.parametrize(
        ("from_path", "to_path", "kind"),
        [
            (None, "a.txt", ChangeKind.ADDED),
            ("", "a.txt", ChangeKind.ADDED),
            ("a.txt", None, ChangeKind.DELETED),
            ("a.txt", "b.txt", ChangeKind.RENAMED),
            ("a.txt", "a.txt", ChangeKind.MODIFIED),
        ],
    )
    def test_classification(
        self, from_path: str | None, to_path: str | None, kind: ChangeKind
    ) -> None:
        assert classify_change(from_path, to_path) == kind


class TestFileChange:
    def test_to_dict(self) -> None:
        change = FileChange(
            path="new.txt",
            kind=ChangeKind.RENAMED,
            staging=StagingStatus.STAGED,
            additions=1,
            deletions=2,
            patch="...",
            prior_path="old.txt",
        )
        assert change.to_dict() == {
            "path": "new.txt",
            "prior_path": "old.txt",
            "status": "renamed",
            "staging_status": "staged",
            "additions": 1,
            "deletions": 2,
            "patch": "...",
        }

    def test_str_enums_compare_to_strings(self) -> None:
        assert ChangeKind.ADDED == "added"
        assert StagingStatus.UNSTAGED == "unstaged"


class TestDiffResult:
    def test_totals(self) -> None:
        files = tuple(
            FileChange(f"f{i}", ChangeKind.MODIFIED, StagingStatus.COMMITTED, i, 1, "")
            for i in range(3)
        )
        result = DiffResult(base_commit="a", head_commit="b", files=files)
        assert result.total_additions == 3
        assert result.total_deletions == 3

    def test_empty(self) -> None:
        result = DiffResult(base_commit="a", head_commit="a", files=())
        assert result.to_dict() == {"base_commit": "a", "head_commit": "a", "files": []}
