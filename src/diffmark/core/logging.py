"""structlog configuration for diffmark and its front ends.

All records, including ones emitted through plain ``logging`` by libraries,
are routed through the root stdlib logger and rendered per output:

    outputs:
      - format: console          # human-readable, stderr
      - format: json             # one object per line
        destination: /var/log/diffmark.jsonl
        level: DEBUG

A request id bound with ``set_request_id`` (or ``request_scope``) is added
to every event logged in the same context, so the HTTP and MCP layers can
correlate a request with the git and state operations it triggered.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from diffmark.config.models import LoggingConfig, LogOutputConfig

_REQUEST_ID_KEY = "request_id"


# =============================================================================
# Request correlation
# =============================================================================


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(_REQUEST_ID_KEY)


def set_request_id(request_id: str | None = None) -> str:
    """Bind a correlation id to the current context, generating one if omitted."""
    rid = request_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(**{_REQUEST_ID_KEY: rid})
    return rid


def clear_request_id() -> None:
    structlog.contextvars.unbind_contextvars(_REQUEST_ID_KEY)


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Bind a request id for the duration of a with-block."""
    previous = get_request_id()
    rid = set_request_id(request_id)
    try:
        yield rid
    finally:
        if previous is None:
            clear_request_id()
        else:
            set_request_id(previous)


# =============================================================================
# Configuration
# =============================================================================


def _level_number(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


def _pre_chain() -> list[structlog.types.Processor]:
    """Processors applied to both structlog events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def _open_stream(destination: str) -> logging.Handler:
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _build_handler(output: LogOutputConfig, level: int) -> logging.Handler:
    if output.format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        interactive = output.destination in ("stderr", "stdout") and stream.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=interactive, pad_event_to=0)

    handler = _open_stream(output.destination)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_pre_chain())
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install handlers on the root logger and point structlog at them.

    Args:
        config: Full logging section. Takes precedence over the simple params.
        json_format: Single stderr output rendered as JSON (simple setup).
        level: Root level for the simple setup.
    """
    from diffmark.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level_number(config.level, logging.INFO)

    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must take effect for loggers created at import time.
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_build_handler(output, _level_number(output.level, root_level)))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger that tags each event with ``logger=<name>``."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
