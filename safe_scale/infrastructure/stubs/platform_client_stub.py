"""Platform client stub for testing.

This module provides an in-memory platform implementing
PlatformClientProtocol, for unit tests of each rollout stage and for
end-to-end orchestrator scenarios.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from safe_scale.domain.errors.platform import PlatformCommandError
from safe_scale.domain.models.app_instance import AppSummary
from safe_scale.domain.models.route import Route


@dataclass
class StubApp:
    """An app held by the stub platform."""

    name: str
    routes: list[Route] = field(default_factory=list)
    services: list[str] = field(default_factory=list)
    instance_count: int = 1
    running: bool = True


class PlatformClientStub:
    """Stub implementation of PlatformClientProtocol.

    Keeps apps and a route table in memory, records every call, and can be
    told to fail specific operations.

    Example:
        >>> platform = PlatformClientStub(space="sandbox")
        >>> platform.add_app("foo", routes=[Route("foo", "cfapps.io")], services=["db"])
        >>> platform.fail_on("bind_service", "bad-service")
        >>> platform.get_app("foo").bound_services
        ('db',)
    """

    def __init__(self, space: str | None = "development") -> None:
        """Initialize the stub with no apps.

        Args:
            space: Name reported as the current space. None simulates an
                untargeted CLI.
        """
        self._space = space
        self.apps: dict[str, StubApp] = {}
        self.route_table: set[Route] = set()
        self.calls: list[tuple[str, ...]] = []

        # Test control: operation -> targets to fail (None fails every call)
        self._failures: dict[str, set[str | None]] = {}

    # ------------------------------------------------------------------
    # Test setup
    # ------------------------------------------------------------------

    def add_app(
        self,
        name: str,
        routes: list[Route] | None = None,
        services: list[str] | None = None,
    ) -> StubApp:
        """Add a running app; its routes are added to the route table."""
        app = StubApp(name=name, routes=list(routes or []), services=list(services or []))
        self.apps[name] = app
        self.route_table.update(app.routes)
        return app

    def fail_on(self, operation: str, target: str | None = None) -> None:
        """Make an operation fail.

        Args:
            operation: Method name, e.g. ``"bind_service"`` or ``"map_route"``.
            target: Only fail for this target: the service name for
                ``bind_service``, the route FQDN for route operations, the app
                name otherwise. None fails every call.
        """
        self._failures.setdefault(operation, set()).add(target)

    def set_space(self, space: str | None) -> None:
        self._space = space

    def calls_to(self, operation: str) -> list[tuple[str, ...]]:
        """Recorded argument tuples for one operation, in call order."""
        return [call[1:] for call in self.calls if call[0] == operation]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record(self, operation: str, *args: str, target: str) -> None:
        self.calls.append((operation, *args))
        targets = self._failures.get(operation)
        if targets is not None and (None in targets or target in targets):
            raise PlatformCommandError(operation, f"injected failure for {target}")

    def _require_app(self, operation: str, name: str) -> StubApp:
        app = self.apps.get(name)
        if app is None:
            raise PlatformCommandError(operation, f"app {name} not found")
        return app

    # ------------------------------------------------------------------
    # PlatformClientProtocol
    # ------------------------------------------------------------------

    def create_app(self, name: str, domain: str, instance_count: int) -> str:
        self._record("create_app", name, domain, str(instance_count), target=name)
        if name in self.apps:
            raise PlatformCommandError("create_app", f"app {name} already exists")
        route = Route(host=name, domain=domain)
        self.apps[name] = StubApp(name=name, routes=[route], instance_count=instance_count)
        self.route_table.add(route)
        return name

    def bind_service(self, app: str, service: str) -> None:
        self._record("bind_service", app, service, target=service)
        stub_app = self._require_app("bind_service", app)
        if service not in stub_app.services:
            stub_app.services.append(service)

    def create_route(self, space: str, domain: str, host: str) -> None:
        route = Route(host=host, domain=domain)
        self._record("create_route", space, domain, host, target=route.fqdn)
        if route in self.route_table:
            raise PlatformCommandError("create_route", f"{route.fqdn} is already taken")
        self.route_table.add(route)

    def delete_route(self, domain: str, host: str) -> None:
        route = Route(host=host, domain=domain)
        self._record("delete_route", domain, host, target=route.fqdn)
        self.route_table.discard(route)
        for stub_app in self.apps.values():
            if route in stub_app.routes:
                stub_app.routes.remove(route)

    def map_route(self, app: str, domain: str, host: str) -> None:
        route = Route(host=host, domain=domain)
        self._record("map_route", app, domain, host, target=route.fqdn)
        stub_app = self._require_app("map_route", app)
        self.route_table.add(route)
        if route not in stub_app.routes:
            stub_app.routes.append(route)

    def unmap_route(self, app: str, domain: str, host: str) -> None:
        route = Route(host=host, domain=domain)
        self._record("unmap_route", app, domain, host, target=route.fqdn)
        stub_app = self._require_app("unmap_route", app)
        if route not in stub_app.routes:
            raise PlatformCommandError("unmap_route", f"{route.fqdn} not mapped to {app}")
        stub_app.routes.remove(route)

    def stop_app(self, app: str) -> None:
        self._record("stop_app", app, target=app)
        self._require_app("stop_app", app).running = False

    def get_app(self, name: str) -> AppSummary:
        self._record("get_app", name, target=name)
        stub_app = self._require_app("get_app", name)
        return AppSummary(
            name=stub_app.name,
            routes=tuple(stub_app.routes),
            bound_services=tuple(stub_app.services),
        )

    def get_current_space(self) -> str:
        self._record("get_current_space", target="")
        if self._space is None:
            raise PlatformCommandError("get_current_space", "no space targeted")
        return self._space
