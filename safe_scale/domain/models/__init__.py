"""Domain models for safe-scale rollouts."""

from safe_scale.domain.models.app_instance import (
    LIVENESS_TRANSITION_MATRIX,
    AppInstance,
    AppSummary,
    Liveness,
)
from safe_scale.domain.models.rollout_session import (
    STAGE_TRANSITION_MATRIX,
    AppRole,
    RolloutSession,
    RolloutStage,
)
from safe_scale.domain.models.route import Route

__all__: list[str] = [
    "AppInstance",
    "AppRole",
    "AppSummary",
    "LIVENESS_TRANSITION_MATRIX",
    "Liveness",
    "RolloutSession",
    "RolloutStage",
    "Route",
    "STAGE_TRANSITION_MATRIX",
]
