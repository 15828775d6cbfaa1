"""Blue decommissioning.

Retires blue once it has drained: the temporary route is unmapped from blue
and deleted from the space, then blue is stopped. Blue is stopped, not
deleted, so it can still be restarted by hand.
"""

from __future__ import annotations

from structlog import get_logger

from safe_scale.application.ports.platform_client import PlatformClientProtocol
from safe_scale.application.services.route_migrator import RouteMigrator
from safe_scale.domain.errors.platform import PlatformCommandError
from safe_scale.domain.errors.rollout import StopError
from safe_scale.domain.models.app_instance import Liveness
from safe_scale.domain.models.rollout_session import AppRole, RolloutSession

logger = get_logger(__name__)


class Decommissioner:
    """Removes blue's temporary route and stops blue."""

    def __init__(
        self, migrator: RouteMigrator, platform: PlatformClientProtocol
    ) -> None:
        self._migrator = migrator
        self._platform = platform

    def decommission(self, session: RolloutSession) -> RolloutSession:
        """Orphan blue's temporary route, then stop blue.

        Args:
            session: Session whose blue has drained.

        Returns:
            Session with blue STOPPED and holding no routes.

        Raises:
            UnmapError: If the temporary route cannot be unmapped or deleted.
            StopError: If the platform refuses to stop blue.
        """
        route = session.temporary_route or session.blue.primary_route
        if route is not None:
            session = self._migrator.unmap_route(
                session, AppRole.BLUE, route, orphan=True
            )

        blue = session.blue
        try:
            self._platform.stop_app(blue.name)
        except PlatformCommandError as e:
            raise StopError(blue.name, session=session) from e

        logger.info("blue_stopped", app=blue.name)
        return session.with_blue(blue.with_liveness(Liveness.STOPPED))
