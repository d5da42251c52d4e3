"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DIFFMARK__SECTION__KEY)
3. User YAML ($XDG_CONFIG_HOME/diffmark/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    DIFFMARK__<SECTION>__<KEY>=<VALUE>

Examples:
    DIFFMARK__LOGGING__LEVEL=DEBUG
    DIFFMARK__REVIEW__BASE_BRANCH=develop
    DIFFMARK__GIT__TIMEOUT_SEC=10
    DIFFMARK__STATE__EXPORT_PATH=/tmp/diffmark-exports
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DIFFMARK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every git subprocess invocation.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ReviewConfig(BaseModel):
    """Review defaults.

    Env vars:
        DIFFMARK__REVIEW__BASE_BRANCH: Branch the committed diff is computed against
    """

    base_branch: str = Field(
        default="main",
        description="Base branch name. The origin/<name> remote-tracking ref is preferred.",
    )

    @field_validator("base_branch")
    @classmethod
    def validate_base_branch(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("base_branch must not be empty")
        return v


class GitConfig(BaseModel):
    """Git subprocess configuration.

    Env vars:
        DIFFMARK__GIT__TIMEOUT_SEC: Timeout for every git subprocess
        DIFFMARK__GIT__LFS_SMUDGE: Resolve LFS pointers via `git lfs smudge`
    """

    timeout_sec: float = Field(
        default=30.0,
        description="Timeout for each git subprocess. Expiry fails the operation.",
    )
    lfs_smudge: bool = Field(
        default=True,
        description="Resolve large-file-storage pointers to real content when reading blobs.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class StateConfig(BaseModel):
    """Review-state storage locations.

    Env vars:
        DIFFMARK__STATE__STATE_DIR: Directory holding viewed.json
        DIFFMARK__STATE__EXPORT_PATH: Base directory for per-repo exports
    """

    state_dir: str | None = Field(
        default=None,
        description="Override state directory. Default: $XDG_STATE_HOME/diffmark.",
    )
    export_path: str | None = Field(
        default=None,
        description="Override export base directory. Default: <state_dir>/exports.",
    )


class DiffmarkConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    state: StateConfig = Field(default_factory=StateConfig)
