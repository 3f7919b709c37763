"""Structured logging for argtok."""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def add_timestamp(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: Dict[str, Any],
) -> Dict[str, Any]:
    """Add ISO format timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def configure_logging(
    level: str = "warning",
    format_type: str = "json",
    stream: Any = None,
) -> None:
    """
    Configure structured logging for the command line application.

    The library itself never calls this; when imported, argtok logs through
    whatever configuration the host application has set up.

    Args:
        level: Log level (debug, info, warning, error). Unknown values fall back to warning.
        format_type: Output format ('json' or 'text')
        stream: Output stream (default: sys.stderr)
    """
    if stream is None:
        stream = sys.stderr

    log_level = _LEVELS.get(level.lower(), logging.WARNING)

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=log_level,
        force=True,
    )

    processors: List[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        add_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    """
    Get a logger, optionally bound to `name`.

    Events are processed by the host's structlog processors and emitted
    through the standard library logger `name`, so its level and handlers
    decide what is shown. The returned proxy resolves the configuration on
    every call.
    """
    return structlog.wrap_logger(
        logging.getLogger(name or "argtok"),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_name=name or "argtok",
    )
