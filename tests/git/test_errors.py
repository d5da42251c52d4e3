"""Tests for git error types."""

from __future__ import annotations

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


class TestGitErrorMessages:
    """Tests for git error message formatting."""

    def test_not_a_repository(self) -> None:
        err = NotARepositoryError("/tmp/nowhere")
        assert "/tmp/nowhere" in str(err)
        assert err.path == "/tmp/nowhere"

    def test_ref_not_found(self) -> None:
        err = RefNotFoundError("develop")
        assert "develop" in str(err)
        assert err.ref == "develop"

    def test_invalid_ref(self) -> None:
        err = InvalidRefError("a..b", "ref cannot contain '..'")
        assert "a..b" in str(err)
        assert err.reason == "ref cannot contain '..'"

    def test_no_head_commit(self) -> None:
        assert "no commits" in str(NoHeadCommitError())

    def test_no_merge_base_truncates_shas(self) -> None:
        left, right = "a" * 40, "b" * 40
        err = NoMergeBaseError(left, right)
        assert "a" * 12 in str(err)
        assert "a" * 13 not in str(err)
        assert err.left == left
        assert err.right == right

    def test_git_operation(self) -> None:
        err = GitOperationError("git status", "fatal: bad object")
        assert str(err) == "git status failed: fatal: bad object"
        assert err.operation == "git status"
        assert err.detail == "fatal: bad object"

    def test_blob_unreadable(self) -> None:
        err = BlobUnreadableError("index", "a.txt", "not staged")
        assert "a.txt" in str(err)
        assert "index" in str(err)
        assert err.reason == "not staged"

    def test_path_escapes(self) -> None:
        err = PathEscapesRepositoryError("../x", "/repo")
        assert "../x" in str(err)
        assert err.repo_root == "/repo"

    def test_lfs_unavailable(self) -> None:
        err = LFSUnavailableError("git-lfs is not installed")
        assert err.reason == "git-lfs is not installed"


class TestHierarchy:
    def test_all_derive_from_git_error(self) -> None:
        errors = [
            NotARepositoryError("p"),
            RefNotFoundError("r"),
            InvalidRefError("r", "x"),
            NoHeadCommitError(),
            NoMergeBaseError("a", "b"),
            GitOperationError("op", "d"),
            BlobUnreadableError("s", "p", "r"),
            PathEscapesRepositoryError("p", "/r"),
            LFSUnavailableError("r"),
        ]
        assert all(isinstance(e, GitError) for e in errors)
