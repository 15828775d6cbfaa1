"""Structured logging configuration with structlog.

This module provides centralized structlog configuration for safe-scale,
supporting both machine-readable (JSON) and human (console) output.

Log Entry Format (json):
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "route_mapped",
        "rollout_id": "uuid",
        ...additional context
    }

Usage:
    # At startup
    from safe_scale.infrastructure.observability import configure_structlog

    configure_structlog(log_format="json")     # JSON output
    configure_structlog(log_format="console")  # Console output

    # Then use structlog normally
    import structlog
    log = structlog.get_logger()
    log.info("event_name", key="value")
"""

import logging
import os
import sys
from typing import cast

import structlog
from structlog.typing import Processor

from safe_scale.infrastructure.observability.rollout_context import (
    rollout_id_processor,
)

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMATS = ("console", "json")


def _get_log_level() -> int:
    """Get the configured log level from environment.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(log_format: str = "console") -> None:
    """Configure structlog for the process.

    Should be called once at startup, before the first rollout.

    Args:
        log_format: 'json' for JSON lines, 'console' for colored output.
            Defaults to 'console'.

    Raises:
        ValueError: If ``log_format`` is not a known format.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {log_format!r}")

    shared_processors: list[Processor] = [
        # Merge context from contextvars
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, rollout_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    # Logs go to stderr; stdout is left for the command's own output
    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
