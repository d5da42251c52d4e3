"""Core module exports."""

from diffmark.core.atomic import write_json_atomic
from diffmark.core.errors import (
    ConfigError,
    DiffmarkError,
    ErrorCode,
    InternalError,
    StorageError,
)
from diffmark.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    request_scope,
    set_request_id,
)

__all__ = [
    # Errors
    "DiffmarkError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "StorageError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "request_scope",
    "set_request_id",
    # Files
    "write_json_atomic",
]
