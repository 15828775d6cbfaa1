"""App instance domain model.

An ``AppInstance`` is one deployable unit taking part in a rollout. Blue and
green are two independently owned instances for the duration of a rollout.
Instances are frozen; every change returns a new instance, so a route set
can only change through the methods below.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from safe_scale.domain.errors.rollout import (
    InvalidLivenessTransitionError,
    RouteNotMappedError,
)
from safe_scale.domain.models.route import Route


class Liveness(Enum):
    """Lifecycle of an app instance within a rollout.

    Values:
        PROVISIONING: Green has been created but is not yet fully bound.
        LIVE: Serving traffic.
        DRAINING: Blue after traffic migration, finishing in-flight work.
        STOPPED: Blue after decommission.
    """

    PROVISIONING = "provisioning"
    LIVE = "live"
    DRAINING = "draining"
    STOPPED = "stopped"


# DRAINING -> LIVE is only taken when an operator-requested restore hands
# the original routes back to blue.
LIVENESS_TRANSITION_MATRIX: dict[Liveness, frozenset[Liveness]] = {
    Liveness.PROVISIONING: frozenset({Liveness.LIVE}),
    Liveness.LIVE: frozenset({Liveness.DRAINING}),
    Liveness.DRAINING: frozenset({Liveness.STOPPED, Liveness.LIVE}),
    Liveness.STOPPED: frozenset(),
}


@dataclass(frozen=True, eq=True)
class AppSummary:
    """What the platform reports about a running app.

    Attributes:
        name: App name.
        routes: Routes currently mapped, in platform order.
        bound_services: Names of bound service instances, in platform order.
    """

    name: str
    routes: tuple[Route, ...] = ()
    bound_services: tuple[str, ...] = ()


@dataclass(frozen=True, eq=True)
class AppInstance:
    """One deployable unit: name, ordered routes, bound services, liveness.

    Attributes:
        name: App name on the platform.
        routes: Routes mapped to the app, in mapping order.
        bound_services: Names of bound service instances.
        liveness: Where the instance is in its lifecycle.
    """

    name: str
    routes: tuple[Route, ...] = ()
    bound_services: frozenset[str] = field(default_factory=frozenset)
    liveness: Liveness = Liveness.PROVISIONING

    @classmethod
    def observe(cls, summary: AppSummary) -> AppInstance:
        """Build the instance for an app that is already running.

        Args:
            summary: The platform's report for the app.

        Returns:
            A LIVE instance carrying the reported routes and services.
        """
        return cls(
            name=summary.name,
            routes=tuple(summary.routes),
            bound_services=frozenset(summary.bound_services),
            liveness=Liveness.LIVE,
        )

    @property
    def primary_route(self) -> Route | None:
        """First mapped route, or None when the app has no routes."""
        return self.routes[0] if self.routes else None

    def has_route(self, route: Route) -> bool:
        return route in self.routes

    def with_route_mapped(self, route: Route) -> AppInstance:
        """Return a copy with ``route`` appended to the route list."""
        return replace(self, routes=(*self.routes, route))

    def without_route(self, route: Route) -> AppInstance:
        """Return a copy with exactly one matching ``route`` removed.

        The remaining routes keep their order.

        Raises:
            RouteNotMappedError: If ``route`` is not in the route list.
        """
        if route not in self.routes:
            raise RouteNotMappedError(route=route, target=self.name)
        index = self.routes.index(route)
        return replace(self, routes=self.routes[:index] + self.routes[index + 1 :])

    def with_service_bound(self, service: str) -> AppInstance:
        return replace(self, bound_services=self.bound_services | {service})

    def with_liveness(self, liveness: Liveness) -> AppInstance:
        """Return a copy in the given lifecycle state.

        Raises:
            InvalidLivenessTransitionError: If the move is not allowed.
        """
        if liveness not in LIVENESS_TRANSITION_MATRIX[self.liveness]:
            raise InvalidLivenessTransitionError(
                app_name=self.name,
                from_liveness=self.liveness.value,
                to_liveness=liveness.value,
            )
        return replace(self, liveness=liveness)
