"""
rawvec logging - structured logging for the storage layer.

The containers never report failures through logs (every failure is
raised to the caller). What they do log, at DEBUG level, is the life of
their raw storage: buffer growth and rollback of failed growth. That is the
trail needed when a profile shows unexpected reallocations.

Architecture:
    ::

        configure_logging(level="DEBUG", json_format=False, service="my-app")
            ↓
        structlog processor chain:
            1. TimeStamper (iso)
            2. add_log_level / add_logger_name
            3. service metadata
            4. JSONRenderer (or ConsoleRenderer for a TTY)

        logger = get_logger(__name__)
        logger.debug("buffer_grown", old_capacity=4, new_capacity=8)

Examples:
    >>> from rawvec.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> get_logger(__name__).debug("buffer_grown", old_capacity=4, new_capacity=8)

Tags:
    logging, structlog, observability, rawvec

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from pydantic import TypeAdapter
from structlog.types import EventDict, Processor, WrappedLogger

from rawvec.core.settings import LogLevel, get_settings

# Store service name for metadata
_SERVICE_NAME = "rawvec"

_LEVELS = TypeAdapter(LogLevel)


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
    service: str = "rawvec",
    add_timestamp: bool = True,
    configure_stdlib: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level; defaults to ``RawVecSettings.log_level``
        json_format: True for JSON, False for console, None for the
            ``RawVecSettings.log_json`` value (auto-detect from TTY when unset)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
        configure_stdlib: Also call logging.basicConfig for the root logger
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    settings = get_settings()
    if level is None:
        level = settings.log_level
    else:
        level = _LEVELS.validate_python(level.upper())
    if json_format is None:
        json_format = settings.log_json
    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(_elasticsearch_compatible)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if configure_stdlib:
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, level),
        )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Configuration is left to the application; call ``configure_logging()``
    to apply the rawvec processor chain.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
