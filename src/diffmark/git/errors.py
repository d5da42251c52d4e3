"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """No repository found at the path or any of its parents."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit) not found."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


class InvalidRefError(GitError):
    """Reference name is unsafe to pass to git."""

    def __init__(self, ref: str, reason: str) -> None:
        super().__init__(f"Invalid reference {ref!r}: {reason}")
        self.ref = ref
        self.reason = reason


class NoHeadCommitError(GitError):
    """HEAD does not resolve to a commit (empty repository or broken HEAD)."""

    def __init__(self) -> None:
        super().__init__("HEAD has no commits (empty repository)")


class NoMergeBaseError(GitError):
    """Two commits share no common ancestor."""

    def __init__(self, left: str, right: str) -> None:
        super().__init__(f"No merge base between {left[:12]} and {right[:12]}")
        self.left = left
        self.right = right


class GitOperationError(GitError):
    """A git subprocess or object-store call failed."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


# =============================================================================
# Blob Errors
# =============================================================================


class BlobUnreadableError(GitError):
    """Blob content is missing or cannot be read."""

    def __init__(self, source: str, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path} from {source}: {reason}")
        self.source = source
        self.path = path
        self.reason = reason


class PathEscapesRepositoryError(GitError):
    """Requested path resolves outside the repository root."""

    def __init__(self, path: str, repo_root: str) -> None:
        super().__init__(f"Path {path!r} escapes repository root {repo_root}")
        self.path = path
        self.repo_root = repo_root


class LFSUnavailableError(GitError):
    """git-lfs is missing or the smudge filter failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"LFS smudge unavailable: {reason}")
        self.reason = reason
