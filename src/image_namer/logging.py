"""Structured logging configuration."""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Final

import structlog

_SECRET_KEYS: Final = frozenset({"api_key", "authorization"})
# Longest data-URI prefix kept in a log line; the base64 payload is dropped
_DATA_URI_KEEP: Final = 48


def redact_payloads(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credentials and cut inline image payloads out of log events."""
    for key, value in event_dict.items():
        if key in _SECRET_KEYS:
            event_dict[key] = "***"
        elif isinstance(value, str) and value.startswith("data:") and len(value) > _DATA_URI_KEEP:
            event_dict[key] = f"{value[:_DATA_URI_KEEP]}...({len(value)} chars)"
    return event_dict


def configure_logging(*, json_output: bool = False, level: int = logging.INFO) -> None:
    """Configure structlog for image naming.

    Args:
        json_output: Emit one JSON object per event for the hosting service's log
            collector. Otherwise, console output for local runs.
        level: Minimum level that is emitted (default: INFO).
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_payloads,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to a module name."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
