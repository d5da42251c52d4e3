"""Diffmark error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 5xxx: Storage (review state and exports)
- 9xxx: Internal

Git and review-state lookups raise plain domain exceptions
(``diffmark.git.errors``, ``diffmark.state.errors``). The coded errors here
cover failures a caller renders as a structured response.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Self


class ErrorCode(IntEnum):
    """Numeric codes grouped by range, stable across releases."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Storage (5xxx)
    STORAGE_READ_ERROR = 5001
    STORAGE_WRITE_ERROR = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DiffmarkError(Exception):
    """Coded failure that HTTP and MCP front ends serialize as-is."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _about_file(
        cls, code: ErrorCode, message: str, path: str, reason: str, *, retryable: bool = False
    ) -> Self:
        return cls(
            code=code,
            message=f"{message}: {reason}",
            retryable=retryable,
            details={"path": path, "reason": reason},
        )

    @property
    def error_name(self) -> str:
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": int(self.code), "error": self.code.name}
        payload.update(message=self.message, retryable=self.retryable, details=self.details)
        return payload

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.code.name}: {self.message}"


class ConfigError(DiffmarkError):
    """Unreadable config file or a setting that fails validation."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls._about_file(
            ErrorCode.CONFIG_PARSE_ERROR, f"Cannot parse config file {path}", path, reason
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Setting '{field}' rejected: {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class StorageError(DiffmarkError):
    """Review state could not be read from or written to disk.

    Writes are retryable: a failed save leaves the store unchanged, so the
    caller may repeat the mutation.
    """

    @property
    def path(self) -> str | None:
        return self.details.get("path")

    @classmethod
    def read_failed(cls, path: str, reason: str) -> "StorageError":
        return cls._about_file(
            ErrorCode.STORAGE_READ_ERROR, f"Failed to read state file {path}", path, reason
        )

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "StorageError":
        return cls._about_file(
            ErrorCode.STORAGE_WRITE_ERROR,
            f"Failed to write state file {path}",
            path,
            reason,
            retryable=True,
        )


class InternalError(DiffmarkError):
    """Broken internal invariant, never caused by caller input."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR, message=f"Internal error: {reason}", details=details
        )
