"""Config module exports."""

from diffmark.config.loader import (
    default_config_path,
    load_config,
    resolve_export_dir,
    resolve_state_dir,
)
from diffmark.config.models import (
    DiffmarkConfig,
    GitConfig,
    LoggingConfig,
    LogOutputConfig,
    ReviewConfig,
    StateConfig,
)

__all__ = [
    "load_config",
    "default_config_path",
    "resolve_state_dir",
    "resolve_export_dir",
    "DiffmarkConfig",
    "GitConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReviewConfig",
    "StateConfig",
]
