"""
Structured logging for elephas.

The cache facade and its backends describe every lookup as a structlog
event (hit, miss, bypass, compute, write). Each facade event is bound
with the cache prefix and backend class, so one process running several
caches can tell their traffic apart in a single log stream.

Architecture:
    ::

        configure_logging(level, json_format, service)
        configure_logging_from_settings(ElephasSettings)

            processor chain:
              TimeStamper (iso, optional)
              merge_contextvars
              add_log_level / add_logger_name
              StackInfoRenderer / set_exc_info
              _add_service_metadata
              _elasticsearch_compatible      (JSON only)
              JSONRenderer | ConsoleRenderer

        Cache.use("AAPL", ...)  ->
          {"event": "cache_hit", "prefix": "quotes", "backend": "RedisBackend",
           "hash": "5ca2...", "key": "AAPL", "service.name": "elephas", ...}

Examples:
    >>> from elephas.config import get_settings
    >>> configure_logging_from_settings(get_settings())
    >>> get_logger(__name__).info("warmup_started", keys=120)

Guardrails:
    ❌ DON'T: Configure logging from library code
    ✅ DO: Configure once at process start; library modules only get_logger()

Tags:
    logging, structlog, observability, ecs, elephas

Doc-Types:
    - API Reference
    - Observability Guide
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from elephas.config import ElephasSettings

# Set by configure_logging()
_SERVICE_NAME = "elephas"

_JSON_FORMATS = {"json": True, "console": False, "auto": None}


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename timestamp/level to the ECS ``@timestamp`` / ``log.level`` fields."""
    for plain, ecs in (("timestamp", "@timestamp"), ("level", "log.level")):
        if plain in event_dict:
            event_dict[ecs] = event_dict.pop(plain)
    return event_dict


def _build_processors(json_format: bool, add_timestamp: bool) -> list[Processor]:
    processors: list[Processor] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if json_format:
        processors += [_elasticsearch_compatible, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "elephas",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog (and the stdlib root logger it writes through).

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None to pick JSON
            whenever stdout is not a terminal
        service: Value of the ``service.name`` field
        add_timestamp: Include an ISO timestamp
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()
    numeric_level = getattr(logging, level.upper())

    structlog.configure(
        processors=_build_processors(json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def configure_logging_from_settings(settings: ElephasSettings, service: str = "elephas") -> None:
    """Apply ``settings.log_level`` and ``settings.log_format``."""
    configure_logging(
        level=settings.log_level,
        json_format=_JSON_FORMATS[settings.log_format],
        service=service,
    )


def get_logger(name: str | None = None) -> Any:
    """Structured logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
]
