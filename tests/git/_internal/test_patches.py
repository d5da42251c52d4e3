"""Tests for git/_internal/patches.py module."""

from __future__ import annotations

import pytest

from diffmark.git._internal.patches import (
    SYMLINK_MODE,
    count_content_lines,
    synthesize_added_patch,
)
from diffmark.git.models import count_patch_lines


class TestCountContentLines:
    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("", 0),
            ("one", 1),
            ("one\n", 1),
            ("one\ntwo", 2),
            ("one\n\nthree\n", 3),
            ("\n\n", 2),
        ],
    )
    def test_counts(self, content: str, expected: int) -> None:
        assert count_content_lines(content) == expected


class TestSynthesizeAddedPatch:
    def test_headers_and_hunk(self) -> None:
        patch = synthesize_added_patch("docs/a.txt", "x\ny\n")
        assert patch == (
            "diff --git a/docs/a.txt b/docs/a.txt\n"
            "new file mode 100644\n"
            "--- /dev/null\n"
            "+++ b/docs/a.txt\n"
            "@@ -0,0 +1,2 @@\n"
            "+x\n"
            "+y\n"
        )

    def test_blank_lines_are_kept(self) -> None:
        patch = synthesize_added_patch("a.txt", "x\n\ny\n")
        assert "+x\n+\n+y\n" in patch
        assert count_patch_lines(patch) == (3, 0)

    def test_missing_final_newline(self) -> None:
        patch = synthesize_added_patch("a.txt", "x\ny")
        assert patch.endswith("+x\n+y\n\\ No newline at end of file\n")

    def test_empty_file_has_no_hunk(self) -> None:
        patch = synthesize_added_patch("empty.txt", "")
        assert "@@" not in patch
        assert count_patch_lines(patch) == (0, 0)

    def test_symlink_mode(self) -> None:
        patch = synthesize_added_patch("link", "target/dir", SYMLINK_MODE)
        assert "new file mode 120000\n" in patch
        assert patch.endswith("@@ -0,0 +1,1 @@\n+target/dir\n\\ No newline at end of file\n")


class TestCountPatchLines:
    def test_skips_file_headers(self) -> None:
        patch = (
            "diff --git a/f b/f\n"
            "--- a/f\n"
            "+++ b/f\n"
            "@@ -1,2 +1,2 @@\n"
            " keep\n"
            "-old\n"
            "+new\n"
            "+added\n"
        )
        assert count_patch_lines(patch) == (2, 1)
