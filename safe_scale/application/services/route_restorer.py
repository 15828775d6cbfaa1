"""Best-effort route restoration after a failed cut-over.

When a rollout fails after routes started moving, the original routes are
put back on blue and taken off green, and blue returns to LIVE. Green is
left running for inspection; the temporary route, if any, is left mapped.
"""

from __future__ import annotations

from structlog import get_logger

from safe_scale.application.services.route_migrator import RouteMigrator
from safe_scale.domain.models.app_instance import Liveness
from safe_scale.domain.models.rollout_session import AppRole, RolloutSession

logger = get_logger(__name__)


class RouteRestorer:
    """Puts blue back on its original routes."""

    def __init__(self, migrator: RouteMigrator) -> None:
        self._migrator = migrator

    def restore(self, session: RolloutSession) -> RolloutSession:
        """Map every original route back to blue and off green.

        Blue is remapped first so a route is never left without an app.

        Raises:
            MapError: If an original route cannot be mapped back to blue.
            UnmapError: If an original route cannot be unmapped from green.
        """
        for route in session.original_blue_routes:
            if not session.blue.has_route(route):
                session = self._migrator.map_route(session, AppRole.BLUE, route)
            if session.green.has_route(route):
                session = self._migrator.unmap_route(session, AppRole.GREEN, route)

        if session.blue.liveness == Liveness.DRAINING:
            session = session.with_blue(session.blue.with_liveness(Liveness.LIVE))

        logger.info(
            "routes_restored",
            blue=session.blue.name,
            routes=[route.fqdn for route in session.original_blue_routes],
        )
        return session
