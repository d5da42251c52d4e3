"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (DIFFMARK__SECTION__KEY)
3. User config ($XDG_CONFIG_HOME/diffmark/config.yaml)
4. Built-in defaults (lowest priority)

Also resolves the on-disk locations of review state and exports.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from diffmark.config.models import (
    DiffmarkConfig,
    GitConfig,
    LoggingConfig,
    ReviewConfig,
    StateConfig,
)
from diffmark.core.errors import ConfigError

APP_DIR_NAME = "diffmark"


def default_config_path() -> Path:
    """User config location, honoring XDG_CONFIG_HOME."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_DIR_NAME / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class DiffmarkSettings(BaseSettings):
        """Root config. Env vars: DIFFMARK__LOGGING__LEVEL, DIFFMARK__GIT__TIMEOUT_SEC, etc."""

        model_config = SettingsConfigDict(
            env_prefix="DIFFMARK__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        review: ReviewConfig = ReviewConfig()
        git: GitConfig = GitConfig()
        state: StateConfig = StateConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return DiffmarkSettings


def load_config(config_path: Path | None = None, **kwargs: Any) -> DiffmarkConfig:
    """Load config: defaults < user config < env vars < kwargs.

    Args:
        config_path: YAML file to read. Defaults to default_config_path().
        **kwargs: Override values (highest precedence), keyed by section.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    yaml_config = _load_yaml(config_path or default_config_path())
    if not isinstance(yaml_config, dict):
        raise ConfigError.parse_error(
            str(config_path or default_config_path()), "top-level value must be a mapping"
        )

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return DiffmarkConfig.model_validate(settings.model_dump())


def resolve_state_dir(config: DiffmarkConfig) -> Path:
    """Directory holding the review-state file.

    Order: config override, $XDG_STATE_HOME, $XDG_DATA_HOME, ~/.local/state.
    """
    if config.state.state_dir:
        return Path(config.state.state_dir).expanduser()
    if state_home := os.environ.get("XDG_STATE_HOME"):
        return Path(state_home) / APP_DIR_NAME
    if data_home := os.environ.get("XDG_DATA_HOME"):
        return Path(data_home) / APP_DIR_NAME
    return Path.home() / ".local" / "state" / APP_DIR_NAME


def resolve_export_dir(config: DiffmarkConfig) -> Path:
    """Base directory for per-repository export files."""
    if config.state.export_path:
        return Path(config.state.export_path).expanduser()
    return resolve_state_dir(config) / "exports"
