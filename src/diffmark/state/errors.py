"""Review-state error types."""


class StateError(Exception):
    """Base error for review-state operations."""

    pass


class CommentNotFoundError(StateError):
    """No comment with this id exists anywhere in the repository."""

    def __init__(self, repo_path: str, comment_id: str) -> None:
        super().__init__(f"Comment not found: {comment_id} (repo {repo_path})")
        self.repo_path = repo_path
        self.comment_id = comment_id


class NoteNotFoundError(StateError):
    """No note with this id exists anywhere in the repository."""

    def __init__(self, repo_path: str, note_id: str) -> None:
        super().__init__(f"Note not found: {note_id} (repo {repo_path})")
        self.repo_path = repo_path
        self.note_id = note_id
