"""
Structured logging for errchain, built on structlog.

errchain itself never decides *when* to log a failure; that is the caller's
job. This module gives callers one consistent way to do it: configure
structlog once, then hand a ChainedError to ``log_error()`` and get a single
line with the rendered cause trail plus every annotation in the chain as a
structured field.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="errchain")
            │
            ▼
        structlog processor chain:
          1. TimeStamper (iso, optional)
          2. merge_contextvars
          3. add_log_level
          4. add service metadata
          5. JSONRenderer (or ConsoleRenderer for a tty)

        log_error(logger, error, "request failed")
            │
            ▼
        {"event": "request failed -> failed to connect -> ValueError: invalid dbId",
         "error_type": "ValueError", "tag": "db-connect", ...}

Usage:
    configure_logging(level="DEBUG", json_format=False)
    logger = get_logger(__name__)

    value, error = attempt(lambda: read_config(path))
    if error:
        log_error(logger, error.with_context(path=path), "startup failed")

Tags:
    logging, structlog, observability, errchain
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from errchain.core.errors import ChainedError, err

# Store service name for metadata
_SERVICE_NAME = "errchain"

# Keys structlog reserves on the event dict
_RESERVED_FIELDS = frozenset({"event", "level", "logger", "timestamp"})


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "errchain",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_from_settings(settings: Any = None) -> None:
    """Configure logging from ``ErrchainSettings`` (loaded from env when omitted)."""
    from errchain.core.settings import get_settings

    settings = settings or get_settings()
    configure_logging(
        level=settings.effective_level,
        json_format=settings.json_logs,
        service=settings.service,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def log_error(logger: Any, error: BaseException, message: str | None = None) -> str:
    """
    Log an error's full cause trail at ERROR level.

    The event is ``error.fmt_err(message)``; annotations from the whole chain
    (deepest wins) are attached as fields, except keys structlog reserves.
    Exceptions that are not ChainedError are wrapped first so their class
    name shows in the trail.

    Returns:
        The rendered message, for callers that also surface it elsewhere
    """
    if not isinstance(error, ChainedError):
        error = err("", error)
    rendered = error.fmt_err(message)
    root = error.root_cause()
    fields: dict[str, Any] = {}
    if isinstance(root, BaseException):
        fields["error_type"] = type(root).__name__
    for key, value in error.chain_context().items():
        if key not in _RESERVED_FIELDS:
            fields[key] = value
    logger.error(rendered, **fields)
    return rendered


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "log_error",
]
