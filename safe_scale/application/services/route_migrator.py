"""Route migration from blue to green.

Moves every externally reachable route from blue to green while keeping blue
reachable on a temporary route, so its drain signal can still be polled.
The order is significant and strictly serial:

1. Create ``temp-<blue primary host>`` in blue's primary domain.
2. Map the temporary route onto blue.
3. Map each of blue's original routes onto green, in original order.
4. Cut over: unmap each original route from blue, then unmap green's
   provisioning route from green.

No original route is ever unmapped from every app, so there is no window in
which a route answers 404.

Route bookkeeping rules:
- A route leaves an in-memory route set only after the platform unmapped it.
- Unmapping a route that is not in the in-memory set is a bookkeeping bug
  and fails loudly without calling the platform.
"""

from __future__ import annotations

from structlog import get_logger

from safe_scale.application.ports.platform_client import PlatformClientProtocol
from safe_scale.domain.errors.platform import PlatformCommandError
from safe_scale.domain.errors.rollout import (
    MapError,
    ProvisionError,
    RouteCreateError,
    RouteDeleteError,
    RouteNotMappedError,
    UnmapError,
)
from safe_scale.domain.models.app_instance import Liveness
from safe_scale.domain.models.rollout_session import AppRole, RolloutSession
from safe_scale.domain.models.route import Route

logger = get_logger(__name__)


class RouteMigrator:
    """Maps, unmaps and deletes routes on behalf of a rollout session.

    Every method takes the session and returns the updated session. Errors
    carry the session as it stood at the failing step.
    """

    def __init__(self, platform: PlatformClientProtocol) -> None:
        self._platform = platform

    def migrate(self, session: RolloutSession) -> RolloutSession:
        """Put green on every original route and blue on the temporary route.

        Raises:
            RouteCreateError: If the temporary route cannot be created.
            MapError: On the first route that cannot be mapped.
        """
        session = self.create_temporary_route(session)
        temporary = session.temporary_route
        assert temporary is not None
        session = self.map_route(session, AppRole.BLUE, temporary)
        for route in session.original_blue_routes:
            session = self.map_route(session, AppRole.GREEN, route)
        logger.info(
            "routes_migrated",
            green=session.green.name,
            routes=[route.fqdn for route in session.original_blue_routes],
        )
        return session

    def cut_over(self, session: RolloutSession) -> RolloutSession:
        """Take the original routes off blue and retire green's push route.

        Afterwards blue serves only the temporary route and is DRAINING.

        Raises:
            UnmapError: On the first route that cannot be unmapped.
        """
        for route in session.original_blue_routes:
            session = self.unmap_route(session, AppRole.BLUE, route)

        provisioning_route = self.provisioning_route(session)
        if provisioning_route in session.original_blue_routes:
            # Blue already served green's push hostname; it now belongs to green
            logger.info("provisioning_route_kept", route=provisioning_route.fqdn)
        else:
            session = self.unmap_route(session, AppRole.GREEN, provisioning_route)

        session = session.with_blue(session.blue.with_liveness(Liveness.DRAINING))
        logger.info(
            "cut_over_complete",
            blue=session.blue.name,
            blue_routes=[route.fqdn for route in session.blue.routes],
        )
        return session

    def provisioning_route(self, session: RolloutSession) -> Route:
        """The ``{green.name}.{primary domain}`` route green was pushed with."""
        primary = session.primary_route
        domain = primary.domain if primary is not None else ""
        return Route(host=session.green.name, domain=domain)

    def create_temporary_route(self, session: RolloutSession) -> RolloutSession:
        """Create the temporary route at the platform level.

        Raises:
            RouteCreateError: If the host is taken or the platform rejects it.
        """
        primary = session.primary_route
        if primary is None:
            raise ProvisionError(
                session.blue.name,
                message=f"{session.blue.name} has no route to derive a temporary route from",
                session=session,
            )
        temporary = primary.temporary()
        try:
            self._platform.create_route(session.space, temporary.domain, temporary.host)
        except PlatformCommandError as e:
            raise RouteCreateError(temporary, session=session) from e
        logger.info("temporary_route_created", route=temporary.fqdn, space=session.space)
        return session.with_temporary_route(temporary)

    def map_route(
        self, session: RolloutSession, role: AppRole, route: Route
    ) -> RolloutSession:
        """Map ``route`` onto the blue or green app and record it.

        A route the app already has is left alone.

        Raises:
            MapError: If the platform refuses the mapping.
        """
        app = session.app(role)
        if app.has_route(route):
            logger.info("route_already_mapped", app=app.name, route=route.fqdn)
            return session
        try:
            self._platform.map_route(app.name, route.domain, route.host)
        except PlatformCommandError as e:
            raise MapError(route, app.name, session=session) from e
        logger.info("route_mapped", app=app.name, role=role.value, route=route.fqdn)
        return session.with_app(role, app.with_route_mapped(route))

    def unmap_route(
        self,
        session: RolloutSession,
        role: AppRole,
        route: Route,
        orphan: bool = False,
    ) -> RolloutSession:
        """Unmap ``route`` from the blue or green app.

        Args:
            session: Current session.
            role: Which app to unmap from.
            route: Route to unmap. Must be in the app's route set.
            orphan: Also delete the route from the platform's route table,
                so no other app can later claim the name.

        Returns:
            Session with exactly one matching entry removed from the app.

        Raises:
            RouteNotMappedError: If the app's route set lacks ``route``.
                Nothing is sent to the platform.
            UnmapError: If the platform refuses the unmap.
            RouteDeleteError: If the route was unmapped but not deleted. The
                session on the error already reflects the unmap.
        """
        app = session.app(role)
        if not app.has_route(route):
            logger.error("route_not_mapped", app=app.name, route=route.fqdn)
            raise RouteNotMappedError(route, app.name, session=session)

        try:
            self._platform.unmap_route(app.name, route.domain, route.host)
        except PlatformCommandError as e:
            raise UnmapError(route, app.name, session=session) from e
        session = session.with_app(role, app.without_route(route))
        logger.info("route_unmapped", app=app.name, role=role.value, route=route.fqdn)

        if orphan:
            try:
                self._platform.delete_route(route.domain, route.host)
            except PlatformCommandError as e:
                raise RouteDeleteError(route, app.name, session=session) from e
            logger.info("route_deleted", route=route.fqdn)
        return session
