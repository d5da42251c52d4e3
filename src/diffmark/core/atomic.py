"""Atomic JSON file replacement."""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path
from typing import Any


def write_json_atomic(path: Path, payload: Any, *, fsync: bool = False) -> None:
    """Write payload as indented JSON via a sibling temp file and os.replace().

    Readers see either the old file or the new one, never a partial write.
    Creates missing parent directories. Raises OSError on failure, after
    removing the temp file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            if fsync:
                f.flush()
                os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise
