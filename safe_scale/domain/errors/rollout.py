"""Rollout domain errors.

Every stage of a rollout reports failure by raising a ``RolloutStageError``
subclass. Stage errors carry the session as it stood when the stage failed,
so the orchestrator can report (and, when asked to, restore) the real state
of blue and green rather than the state at the start of the stage.

Messages are written for the operator running the rollout: they name the
app, route or endpoint involved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from safe_scale.domain.exceptions import SafeScaleError

if TYPE_CHECKING:
    from safe_scale.domain.models.rollout_session import RolloutSession
    from safe_scale.domain.models.route import Route


class ArgumentError(SafeScaleError, ValueError):
    """Raised for bad or missing command input and invalid configuration."""

    pass


class InvalidLivenessTransitionError(SafeScaleError):
    """Raised when an app instance is moved to a lifecycle state out of order.

    Attributes:
        app_name: The instance being moved.
        from_liveness: Current liveness value.
        to_liveness: Attempted liveness value.
    """

    def __init__(self, app_name: str, from_liveness: str, to_liveness: str) -> None:
        self.app_name = app_name
        self.from_liveness = from_liveness
        self.to_liveness = to_liveness
        super().__init__(
            f"{app_name} cannot move from {from_liveness} to {to_liveness}"
        )


class InvalidStageTransitionError(SafeScaleError):
    """Raised when the rollout skips, repeats or reverses a stage.

    Attributes:
        from_stage: Current stage.
        to_stage: Attempted stage.
        expected_stage: The stage that should follow, None if terminal.
    """

    def __init__(
        self, from_stage: str, to_stage: str, expected_stage: str | None
    ) -> None:
        self.from_stage = from_stage
        self.to_stage = to_stage
        self.expected_stage = expected_stage
        super().__init__(
            f"Invalid rollout stage transition {from_stage} -> {to_stage} "
            f"(expected {expected_stage or 'none, rollout is complete'})"
        )


class RolloutStageError(SafeScaleError):
    """Base class for errors raised by a rollout stage.

    Attributes:
        session: The rollout session at the moment of failure, if known.
    """

    def __init__(self, message: str, session: RolloutSession | None = None) -> None:
        super().__init__(message)
        self.session = session


class ProvisionError(RolloutStageError):
    """Raised when green cannot be created, or blue cannot be replaced at all."""

    def __init__(
        self,
        app_name: str,
        message: str | None = None,
        session: RolloutSession | None = None,
    ) -> None:
        self.app_name = app_name
        super().__init__(message or f"Unable to create {app_name}", session)


class BindingError(RolloutStageError):
    """Raised when one of blue's services cannot be bound to green.

    Attributes:
        service: The service that failed to bind.
        app_name: The app it was being bound to.
    """

    def __init__(
        self, service: str, app_name: str, session: RolloutSession | None = None
    ) -> None:
        self.service = service
        self.app_name = app_name
        super().__init__(f"Could not bind {service} service to {app_name}", session)


class HealthCheckError(RolloutStageError):
    """Raised when green fails its readiness check and unhealthy is fatal."""

    def __init__(
        self, url: str, app_name: str, session: RolloutSession | None = None
    ) -> None:
        self.url = url
        self.app_name = app_name
        super().__init__(
            f"{app_name} is not healthy at {url}. "
            "Routes from the old app were not transferred",
            session,
        )


class RouteCreateError(RolloutStageError):
    """Raised when the temporary route cannot be created."""

    def __init__(self, route: Route, session: RolloutSession | None = None) -> None:
        self.route = route
        super().__init__(f"Could not create temporary route {route.fqdn}", session)


class MapError(RolloutStageError):
    """Raised when a route cannot be mapped to an app.

    Attributes:
        route: The route being mapped.
        target: Name of the app it was being mapped to.
    """

    def __init__(
        self, route: Route, target: str, session: RolloutSession | None = None
    ) -> None:
        self.route = route
        self.target = target
        super().__init__(f"Could not map {route.fqdn} route to {target}", session)


class UnmapError(RolloutStageError):
    """Raised when a route cannot be unmapped from an app.

    Attributes:
        route: The route being unmapped.
        target: Name of the app it was being unmapped from.
    """

    def __init__(
        self,
        route: Route,
        target: str,
        message: str | None = None,
        session: RolloutSession | None = None,
    ) -> None:
        self.route = route
        self.target = target
        super().__init__(
            message or f"Could not unmap {route.fqdn} route from {target}", session
        )


class RouteNotMappedError(UnmapError):
    """Raised when asked to unmap a route the app does not have.

    This is a bookkeeping bug, not a platform failure: the request is never
    sent to the platform.
    """

    def __init__(
        self, route: Route, target: str, session: RolloutSession | None = None
    ) -> None:
        super().__init__(
            route,
            target,
            message=f"{route.fqdn} is not mapped to {target}",
            session=session,
        )


class RouteDeleteError(UnmapError):
    """Raised when an orphaned route cannot be deleted from the space."""

    def __init__(
        self, route: Route, target: str, session: RolloutSession | None = None
    ) -> None:
        super().__init__(
            route,
            target,
            message=f"Could not delete {route.fqdn} route from space",
            session=session,
        )


class DrainCheckError(RolloutStageError):
    """Raised when the drain endpoint answers anything but 200 or 204.

    Attributes:
        url: The drain endpoint.
        app_name: The app being drained.
        status_code: The status received, None for a transport error.
    """

    def __init__(
        self,
        url: str,
        app_name: str,
        status_code: int | None = None,
        session: RolloutSession | None = None,
    ) -> None:
        self.url = url
        self.app_name = app_name
        self.status_code = status_code
        if status_code is None:
            message = (
                f"{url} endpoint is unreachable. "
                f"Check to make sure {app_name} is healthy"
            )
        else:
            message = (
                f"Status code {status_code}. {url} endpoint is not okay. "
                f"Check to make sure {app_name} is healthy"
            )
        super().__init__(message, session)


class DrainTimeoutError(RolloutStageError):
    """Raised when the drain endpoint never reports 204 before the deadline."""

    def __init__(
        self,
        url: str,
        app_name: str,
        timeout_seconds: float,
        session: RolloutSession | None = None,
    ) -> None:
        self.url = url
        self.app_name = app_name
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"The request timed out. {url} endpoint failed to provide HTTP Status "
            f"Code 204 within {timeout_seconds:g}s. Can't safely shut down {app_name}",
            session,
        )


class StopError(RolloutStageError):
    """Raised when blue cannot be stopped."""

    def __init__(self, app_name: str, session: RolloutSession | None = None) -> None:
        self.app_name = app_name
        super().__init__(f"Failed to stop {app_name} from running", session)
