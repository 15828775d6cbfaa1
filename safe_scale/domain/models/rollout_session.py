"""Rollout session aggregate.

A ``RolloutSession`` is the orchestrator's working state for one invocation.
It is frozen and threaded through each stage: a stage takes the session and
returns an updated copy, so exactly one owner holds the current state at any
time.

The rollout follows a strict stage sequence:
PROVISION_GREEN -> VERIFY_HEALTH -> MIGRATE_ROUTES -> DRAIN -> DECOMMISSION -> COMPLETE
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum

from safe_scale.domain.errors.rollout import InvalidStageTransitionError
from safe_scale.domain.models.app_instance import AppInstance
from safe_scale.domain.models.route import Route


class RolloutStage(Enum):
    """Stage of the rollout state machine.

    Stages:
        PROVISION_GREEN: Create green and replicate blue's service bindings.
        VERIFY_HEALTH: One-shot readiness check against green.
        MIGRATE_ROUTES: Move blue's routes onto green, keep blue on a temp route.
        DRAIN: Wait for blue to finish in-flight work.
        DECOMMISSION: Remove the temp route and stop blue.
        COMPLETE: Terminal.
    """

    PROVISION_GREEN = "provision_green"
    VERIFY_HEALTH = "verify_health"
    MIGRATE_ROUTES = "migrate_routes"
    DRAIN = "drain"
    DECOMMISSION = "decommission"
    COMPLETE = "complete"

    def is_terminal(self) -> bool:
        return self == RolloutStage.COMPLETE

    def next_stage(self) -> RolloutStage | None:
        """Get the next stage in the sequence, or None when terminal."""
        return STAGE_TRANSITION_MATRIX.get(self)


class AppRole(Enum):
    """Which side of the rollout an app instance plays."""

    BLUE = "blue"
    GREEN = "green"


STAGE_TRANSITION_MATRIX: dict[RolloutStage, RolloutStage | None] = {
    RolloutStage.PROVISION_GREEN: RolloutStage.VERIFY_HEALTH,
    RolloutStage.VERIFY_HEALTH: RolloutStage.MIGRATE_ROUTES,
    RolloutStage.MIGRATE_ROUTES: RolloutStage.DRAIN,
    RolloutStage.DRAIN: RolloutStage.DECOMMISSION,
    RolloutStage.DECOMMISSION: RolloutStage.COMPLETE,
    RolloutStage.COMPLETE: None,
}


@dataclass(frozen=True, eq=True)
class RolloutSession:
    """Working state for one blue-green rollout.

    Attributes:
        rollout_id: Identifier bound to every log entry of the rollout.
        space: Platform space the routes are created in.
        blue: The app being replaced.
        green: The replacement app.
        original_blue_routes: Blue's routes snapshotted before any change.
            This is the authoritative record of what must end up on green.
        blue_services: Blue's bound services snapshotted at session start.
        temporary_route: Route keeping blue reachable during drain, once created.
        health_check_path: Path probed on green, None to skip the check.
        drain_check_path: Path polled on blue, None for a hard cut-over.
        drain_timeout: How long blue may take to drain.
        target_instance_count: Instance count for green.
        stage: Current stage of the rollout.
    """

    rollout_id: str
    space: str
    blue: AppInstance
    green: AppInstance
    original_blue_routes: tuple[Route, ...]
    blue_services: tuple[str, ...] = ()
    temporary_route: Route | None = None
    health_check_path: str | None = None
    drain_check_path: str | None = None
    drain_timeout: timedelta = timedelta(seconds=120)
    target_instance_count: int = 1
    stage: RolloutStage = RolloutStage.PROVISION_GREEN

    @classmethod
    def start(
        cls,
        rollout_id: str,
        space: str,
        blue: AppInstance,
        green_name: str,
        *,
        blue_services: tuple[str, ...] | None = None,
        health_check_path: str | None = None,
        drain_check_path: str | None = None,
        drain_timeout: timedelta = timedelta(seconds=120),
        target_instance_count: int = 1,
    ) -> RolloutSession:
        """Open a session for ``blue`` before anything has been changed.

        Snapshots blue's routes and services, and creates the (not yet
        provisioned) green instance.

        Args:
            rollout_id: Identifier for this rollout.
            space: Platform space name.
            blue: The running app, as observed at session start.
            green_name: Name for the replacement app.
            blue_services: Blue's services in platform order. Defaults to
                blue's bound services sorted by name.
            health_check_path: Optional readiness path on green.
            drain_check_path: Optional drain signal path on blue.
            drain_timeout: Deadline for draining.
            target_instance_count: Instance count for green.

        Returns:
            A session in the PROVISION_GREEN stage.
        """
        return cls(
            rollout_id=rollout_id,
            space=space,
            blue=blue,
            green=AppInstance(name=green_name),
            original_blue_routes=tuple(blue.routes),
            blue_services=(
                tuple(blue_services)
                if blue_services is not None
                else tuple(sorted(blue.bound_services))
            ),
            health_check_path=health_check_path,
            drain_check_path=drain_check_path,
            drain_timeout=drain_timeout,
            target_instance_count=target_instance_count,
        )

    @property
    def primary_route(self) -> Route | None:
        """Blue's first route at session start; green is deployed to its domain."""
        return self.original_blue_routes[0] if self.original_blue_routes else None

    @property
    def is_complete(self) -> bool:
        return self.stage.is_terminal()

    def with_blue(self, blue: AppInstance) -> RolloutSession:
        return replace(self, blue=blue)

    def with_green(self, green: AppInstance) -> RolloutSession:
        return replace(self, green=green)

    def app(self, role: AppRole) -> AppInstance:
        return self.blue if role is AppRole.BLUE else self.green

    def with_app(self, role: AppRole, app: AppInstance) -> RolloutSession:
        if role is AppRole.BLUE:
            return self.with_blue(app)
        return self.with_green(app)

    def with_temporary_route(self, route: Route) -> RolloutSession:
        return replace(self, temporary_route=route)

    def with_stage(self, new_stage: RolloutStage) -> RolloutSession:
        """Create a new session in the next stage.

        Args:
            new_stage: The stage to move to.

        Returns:
            New RolloutSession with updated stage.

        Raises:
            InvalidStageTransitionError: If the move skips or repeats a stage.
        """
        expected = self.stage.next_stage()
        if new_stage != expected:
            raise InvalidStageTransitionError(
                from_stage=self.stage.value,
                to_stage=new_stage.value,
                expected_stage=expected.value if expected else None,
            )
        return replace(self, stage=new_stage)
