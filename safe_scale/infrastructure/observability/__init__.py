"""Observability infrastructure for structured logging and rollout correlation.

Usage:
    from safe_scale.infrastructure.observability import (
        configure_structlog,
        set_rollout_id,
    )

    configure_structlog(log_format="json")
    set_rollout_id(session.rollout_id)
"""

from safe_scale.infrastructure.observability.logging import configure_structlog
from safe_scale.infrastructure.observability.rollout_context import (
    generate_rollout_id,
    get_rollout_id,
    rollout_id_processor,
    set_rollout_id,
)

__all__: list[str] = [
    "configure_structlog",
    "generate_rollout_id",
    "get_rollout_id",
    "rollout_id_processor",
    "set_rollout_id",
]
