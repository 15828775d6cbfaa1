"""Rollout ID management for log correlation.

Every log entry written during a rollout carries the rollout's ID, so the
entries of one invocation can be pulled out of a shared log stream.

Usage:
    # When a rollout starts
    set_rollout_id(session.rollout_id)

    # In structlog configuration
    processors = [..., rollout_id_processor, ...]
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Default is empty string to avoid None type issues
_rollout_id: ContextVar[str] = ContextVar("rollout_id", default="")


def generate_rollout_id() -> str:
    """Generate a new rollout ID (UUID4)."""
    return str(uuid4())


def get_rollout_id() -> str:
    """Get the current rollout ID, or an empty string if none is set."""
    return _rollout_id.get()


def set_rollout_id(rollout_id: str) -> None:
    """Set the rollout ID in the current context.

    Args:
        rollout_id: The rollout ID to set.
    """
    _rollout_id.set(rollout_id)


def rollout_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor to add rollout_id to every log entry.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with rollout_id added.
    """
    rollout_id = get_rollout_id()
    if rollout_id:
        event_dict["rollout_id"] = rollout_id
    return event_dict
