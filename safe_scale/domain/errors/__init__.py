"""Domain errors for safe-scale.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from SafeScaleError.
"""

from safe_scale.domain.errors.platform import (
    AppNotFoundError,
    EndpointUnreachableError,
    PlatformCommandError,
    ResourceLookupError,
    SpaceNotFoundError,
)
from safe_scale.domain.errors.rollout import (
    ArgumentError,
    BindingError,
    DrainCheckError,
    DrainTimeoutError,
    HealthCheckError,
    InvalidLivenessTransitionError,
    InvalidStageTransitionError,
    MapError,
    ProvisionError,
    RolloutStageError,
    RouteCreateError,
    RouteDeleteError,
    RouteNotMappedError,
    StopError,
    UnmapError,
)

__all__: list[str] = [
    "AppNotFoundError",
    "ArgumentError",
    "BindingError",
    "DrainCheckError",
    "DrainTimeoutError",
    "EndpointUnreachableError",
    "HealthCheckError",
    "InvalidLivenessTransitionError",
    "InvalidStageTransitionError",
    "MapError",
    "PlatformCommandError",
    "ProvisionError",
    "ResourceLookupError",
    "RolloutStageError",
    "RouteCreateError",
    "RouteDeleteError",
    "RouteNotMappedError",
    "SpaceNotFoundError",
    "StopError",
    "UnmapError",
]
