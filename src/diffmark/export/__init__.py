"""Comment and note exports for external tools."""

from diffmark.export.exporter import (
    EXPORT_FILE_NAME,
    Exporter,
    build_payload,
    export_path_for_repo,
    load_export,
)

__all__ = [
    "EXPORT_FILE_NAME",
    "Exporter",
    "build_payload",
    "export_path_for_repo",
    "load_export",
]
