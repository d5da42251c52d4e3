"""Synthesized unified diffs for content git has no pre-image for."""

from __future__ import annotations

REGULAR_FILE_MODE = "100644"
SYMLINK_MODE = "120000"


def count_content_lines(content: str) -> int:
    """Newline terminators, plus one for a final unterminated line."""
    count = content.count("\n")
    if content and not content.endswith("\n"):
        count += 1
    return count


def synthesize_added_patch(path: str, content: str, mode: str = REGULAR_FILE_MODE) -> str:
    """Unified diff adding `content` as a new file, with no pre-image section.

    For a symlink pass the link target as `content` and `SYMLINK_MODE`.
    """
    line_count = count_content_lines(content)
    parts = [
        f"diff --git a/{path} b/{path}\n",
        f"new file mode {mode}\n",
        "--- /dev/null\n",
        f"+++ b/{path}\n",
    ]
    if line_count:
        parts.append(f"@@ -0,0 +1,{line_count} @@\n")
        parts.extend(f"+{line}\n" for line in content.split("\n")[:line_count])
        if not content.endswith("\n"):
            parts.append("\\ No newline at end of file\n")
    return "".join(parts)
