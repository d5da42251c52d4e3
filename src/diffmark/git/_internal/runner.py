"""Git CLI invocation with a hard timeout.

The object model (pygit2) cannot apply external filter drivers such as
git-lfs, so status, worktree/index diffs and blob reads go through the
native git binary.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import structlog

from diffmark.git.errors import GitOperationError

log = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


class GitRunner:
    """Runs `git` subcommands in one working tree."""

    def __init__(
        self, cwd: Path, timeout_sec: float = DEFAULT_TIMEOUT_SEC, executable: str = "git"
    ) -> None:
        self._cwd = cwd
        self._timeout = timeout_sec
        self._executable = executable

    @property
    def timeout_sec(self) -> float:
        return self._timeout

    def run(self, args: Sequence[str], *, stdin: bytes | None = None) -> bytes:
        """Run `git <args>` and return stdout.

        Raises:
            GitOperationError: non-zero exit, timeout, or git not installed.
        """
        cmd = [self._executable, *args]
        operation = f"git {args[0]}" if args else "git"
        log.debug("git_invoke", args=list(args), cwd=str(self._cwd))
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self._cwd),
                input=stdin,
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            log.warning("git_timeout", args=list(args), timeout_sec=self._timeout)
            raise GitOperationError(operation, f"timed out after {self._timeout}s") from e
        except OSError as e:
            raise GitOperationError(operation, str(e)) from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise GitOperationError(operation, stderr or f"exit status {result.returncode}")
        return result.stdout

    def run_text(self, args: Sequence[str]) -> str:
        return self.run(args).decode("utf-8", errors="replace")
