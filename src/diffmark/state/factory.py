"""Store construction from configuration."""

from __future__ import annotations

from diffmark.config import DiffmarkConfig, resolve_export_dir, resolve_state_dir
from diffmark.export.exporter import Exporter
from diffmark.state.persistence import STATE_FILE_NAME, JsonFilePersister
from diffmark.state.store import ReviewStateStore


def open_store(config: DiffmarkConfig) -> ReviewStateStore:
    """File-backed store whose saves also refresh the per-repo export."""
    persister = JsonFilePersister(resolve_state_dir(config) / STATE_FILE_NAME)
    exporter = Exporter(resolve_export_dir(config))
    return ReviewStateStore(persister, on_save=exporter.export_repo)
