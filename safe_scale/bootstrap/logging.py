"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from safe_scale.infrastructure.observability import configure_structlog as _configure_structlog


def configure_structlog(log_format: str) -> None:
    """Configure structlog for the given output format."""
    _configure_structlog(log_format=log_format)


__all__ = ["configure_structlog"]
