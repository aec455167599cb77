"""Structured logging setup with structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from admin_core.config.schema import LoggingConfig

SERVICE_NAME = "admin-platform"


def _add_service(_logger, _method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
) -> None:
    """Configure structlog for the admin backend.

    Every record carries ``service`` plus the ``component`` it was bound with
    via :func:`get_logger`.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for production, "console" for development.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def configure_from(config: LoggingConfig) -> None:
    """Apply the ``logging`` section of the app config."""
    setup_logging(level=config.level, log_format=config.format)


def get_logger(component: str | None = None, **initial_context) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger named after *component* and bound to it.

    The logger stays lazy, so module-level loggers pick up whatever
    :func:`setup_logging` configures later.
    """
    if not component:
        return structlog.get_logger(**initial_context)
    initial_context.setdefault("component", component)
    return structlog.get_logger(component, **initial_context)
