"""Rollout orchestrator.

Drives one blue-green rollout through its fixed stage sequence:
PROVISION_GREEN -> VERIFY_HEALTH -> MIGRATE_ROUTES -> DRAIN -> DECOMMISSION.

Each stage takes the session and returns an updated session, or raises a
RolloutStageError carrying the session as it stood at the failure. The first
error halts the rollout: no later stage runs and the error is reported
verbatim. Restoring routes is opt-in and only applies to failures after
routes started moving.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from structlog import get_logger

from safe_scale.application.ports.endpoint_probe import EndpointProbeProtocol
from safe_scale.application.ports.platform_client import PlatformClientProtocol
from safe_scale.application.services.app_provisioner import AppProvisioner
from safe_scale.application.services.decommissioner import Decommissioner
from safe_scale.application.services.drain_monitor import DrainMonitor
from safe_scale.application.services.health_probe import HealthProbe
from safe_scale.application.services.route_migrator import RouteMigrator
from safe_scale.application.services.route_restorer import RouteRestorer
from safe_scale.config.rollout_config import DEFAULT_ROLLOUT_CONFIG, RolloutConfig
from safe_scale.domain.errors.platform import (
    AppNotFoundError,
    PlatformCommandError,
    SpaceNotFoundError,
)
from safe_scale.domain.errors.rollout import (
    ArgumentError,
    HealthCheckError,
    RolloutStageError,
)
from safe_scale.domain.exceptions import SafeScaleError
from safe_scale.domain.models.app_instance import AppInstance
from safe_scale.domain.models.rollout_session import RolloutSession, RolloutStage
from safe_scale.infrastructure.observability.rollout_context import (
    generate_rollout_id,
    set_rollout_id,
)

logger = get_logger(__name__)

# Stages after which blue's routes may have moved
RESTORABLE_STAGES = frozenset({RolloutStage.MIGRATE_ROUTES, RolloutStage.DRAIN})


@dataclass(frozen=True)
class RolloutReport:
    """Outcome of one rollout.

    Attributes:
        session: Final session, or the session as it stood at the failure.
            None if the rollout could not be started.
        error: The first error, None on success.
        failed_stage: Stage that raised ``error``.
        restored: True if blue's routes were restored after the failure.
        restore_error: Error raised while restoring, if any. ``error``
            remains the reported cause.
    """

    session: RolloutSession | None
    error: SafeScaleError | None = None
    failed_stage: RolloutStage | None = None
    restored: bool = False
    restore_error: SafeScaleError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class RolloutOrchestrator:
    """Runs the rollout stage machine for a single app.

    Collaborators default to the standard stage services built on the given
    platform and probe; each can be replaced for tests.

    Example:
        >>> platform = PlatformClientStub()
        >>> platform.add_app("foo", routes=[Route("foo", "cfapps.io")])
        >>> orchestrator = RolloutOrchestrator(platform, EndpointProbeStub())
        >>> orchestrator.run("foo").succeeded
        True
    """

    def __init__(
        self,
        platform: PlatformClientProtocol,
        probe: EndpointProbeProtocol,
        config: RolloutConfig | None = None,
        *,
        provisioner: AppProvisioner | None = None,
        health_probe: HealthProbe | None = None,
        migrator: RouteMigrator | None = None,
        drain_monitor: DrainMonitor | None = None,
        decommissioner: Decommissioner | None = None,
        restorer: RouteRestorer | None = None,
        id_factory: Callable[[], str] = generate_rollout_id,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            platform: Platform client used by every stage.
            probe: Endpoint probe for the health check and drain polling.
            config: Rollout configuration. Defaults to DEFAULT_ROLLOUT_CONFIG.
            provisioner: Override for the PROVISION_GREEN stage.
            health_probe: Override for the VERIFY_HEALTH stage.
            migrator: Override for route operations.
            drain_monitor: Override for the DRAIN stage.
            decommissioner: Override for the DECOMMISSION stage.
            restorer: Override for opt-in route restoration.
            id_factory: Generates the rollout ID.
        """
        self._platform = platform
        self._config = config or DEFAULT_ROLLOUT_CONFIG
        self._migrator = migrator or RouteMigrator(platform)
        self._provisioner = provisioner or AppProvisioner(platform)
        self._health_probe = health_probe or HealthProbe(probe)
        self._drain_monitor = drain_monitor or DrainMonitor(
            probe, poll_interval=self._config.poll_interval_seconds
        )
        self._decommissioner = decommissioner or Decommissioner(
            self._migrator, platform
        )
        self._restorer = restorer or RouteRestorer(self._migrator)
        self._id_factory = id_factory

        self._stages: dict[RolloutStage, Callable[[RolloutSession], RolloutSession]] = {
            RolloutStage.PROVISION_GREEN: self._provisioner.provision,
            RolloutStage.VERIFY_HEALTH: self._verify_health,
            RolloutStage.MIGRATE_ROUTES: self._migrate_routes,
            RolloutStage.DRAIN: self._drain_monitor.await_drained,
            RolloutStage.DECOMMISSION: self._decommissioner.decommission,
        }

    @property
    def config(self) -> RolloutConfig:
        return self._config

    def run(self, app_name: str) -> RolloutReport:
        """Roll out a replacement for ``app_name``.

        Never raises for expected failures: lookup and stage errors are
        returned on the report.

        Args:
            app_name: Name of the running (blue) app.

        Returns:
            RolloutReport describing the outcome.
        """
        rollout_id = self._id_factory()
        set_rollout_id(rollout_id)
        logger.info("rollout_requested", app=app_name)

        try:
            session = self.open_session(app_name, rollout_id)
        except (ArgumentError, AppNotFoundError, SpaceNotFoundError) as e:
            logger.error("rollout_not_started", app=app_name, error=str(e))
            return RolloutReport(session=None, error=e)

        return self.execute(session)

    def open_session(
        self, app_name: str, rollout_id: str | None = None
    ) -> RolloutSession:
        """Look up blue and open a session before anything is changed.

        Args:
            app_name: Name of the running app.
            rollout_id: ID for the session. Generated when omitted.

        Returns:
            Session in the PROVISION_GREEN stage.

        Raises:
            ArgumentError: If the app name is blank or green's name collides.
            AppNotFoundError: If the platform cannot report on the app.
            SpaceNotFoundError: If the current space cannot be determined.
        """
        if not app_name or not app_name.strip():
            raise ArgumentError("An app name is required")

        try:
            summary = self._platform.get_app(app_name)
        except PlatformCommandError as e:
            raise AppNotFoundError(app_name) from e

        try:
            space = self._platform.get_current_space()
        except PlatformCommandError as e:
            raise SpaceNotFoundError() from e

        blue = AppInstance.observe(summary)
        session = RolloutSession.start(
            rollout_id=rollout_id or self._id_factory(),
            space=space,
            blue=blue,
            green_name=self._config.green_name_for(blue.name),
            blue_services=summary.bound_services,
            health_check_path=self._config.health_check_path,
            drain_check_path=self._config.drain_check_path,
            drain_timeout=self._config.drain_timeout,
            target_instance_count=self._config.instance_count,
        )
        logger.info(
            "rollout_session_opened",
            blue=blue.name,
            green=session.green.name,
            space=space,
            routes=[route.fqdn for route in session.original_blue_routes],
            services=list(session.blue_services),
        )
        return session

    def execute(self, session: RolloutSession) -> RolloutReport:
        """Run every remaining stage of ``session`` in order.

        Args:
            session: An open session.

        Returns:
            RolloutReport with the completed session, or the first error and
            the stage that raised it.
        """
        set_rollout_id(session.rollout_id)

        while not session.is_complete:
            stage = session.stage
            logger.info("stage_started", stage=stage.value)
            try:
                session = self._stages[stage](session)
            except RolloutStageError as e:
                return self._abort(e.session or session, stage, e)

            next_stage = stage.next_stage()
            if next_stage is None:
                break
            session = session.with_stage(next_stage)
            logger.info("stage_completed", stage=stage.value)

        logger.info("rollout_complete", blue=session.blue.name, green=session.green.name)
        return RolloutReport(session=session)

    def _verify_health(self, session: RolloutSession) -> RolloutSession:
        if self._health_probe.check(session):
            return session

        url = self._health_probe.endpoint(session) or session.green.name
        if self._config.abort_on_unhealthy:
            raise HealthCheckError(url, session.green.name, session=session)

        logger.warning("green_unhealthy_continuing", app=session.green.name, url=url)
        return session

    def _migrate_routes(self, session: RolloutSession) -> RolloutSession:
        session = self._migrator.migrate(session)
        return self._migrator.cut_over(session)

    def _abort(
        self, session: RolloutSession, stage: RolloutStage, error: RolloutStageError
    ) -> RolloutReport:
        logger.error(
            "rollout_aborted",
            stage=stage.value,
            error=str(error),
            error_type=type(error).__name__,
        )

        if not (self._config.restore_on_failure and stage in RESTORABLE_STAGES):
            return RolloutReport(session=session, error=error, failed_stage=stage)

        try:
            session = self._restorer.restore(session)
        except RolloutStageError as restore_error:
            logger.error("route_restore_failed", error=str(restore_error))
            return RolloutReport(
                session=restore_error.session or session,
                error=error,
                failed_stage=stage,
                restore_error=restore_error,
            )

        return RolloutReport(
            session=session, error=error, failed_stage=stage, restored=True
        )
