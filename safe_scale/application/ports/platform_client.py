"""Platform client port.

The rollout only needs a narrow slice of the platform: create and stop apps,
bind services, and create, delete, map and unmap routes. How those operations
reach the platform (CLI, management API, credentials) is the adapter's
business.

Every mutating method either succeeds or raises ``PlatformCommandError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from safe_scale.domain.models.app_instance import AppSummary


@runtime_checkable
class PlatformClientProtocol(Protocol):
    """Protocol for the platform operations used by a rollout.

    Implementations:
    - CfCliPlatformAdapter: drives the ``cf`` command line
    - PlatformClientStub: in-memory platform for tests
    """

    def create_app(self, name: str, domain: str, instance_count: int) -> str:
        """Create (push) an app with a route ``name.domain``.

        Args:
            name: App name, also used as the hostname of its first route.
            domain: Domain for the app's first route.
            instance_count: Number of instances to run.

        Returns:
            The name of the created app.

        Raises:
            PlatformCommandError: If the platform rejects the app.
        """
        ...

    def bind_service(self, app: str, service: str) -> None:
        """Bind an existing service instance to an app.

        Raises:
            PlatformCommandError: If the binding fails.
        """
        ...

    def create_route(self, space: str, domain: str, host: str) -> None:
        """Create a route in a space without mapping it.

        Raises:
            PlatformCommandError: If the route is taken or rejected.
        """
        ...

    def delete_route(self, domain: str, host: str) -> None:
        """Delete a route from the space's route table.

        Raises:
            PlatformCommandError: If the route cannot be deleted.
        """
        ...

    def map_route(self, app: str, domain: str, host: str) -> None:
        """Map a route to an app.

        Raises:
            PlatformCommandError: If the mapping fails.
        """
        ...

    def unmap_route(self, app: str, domain: str, host: str) -> None:
        """Unmap a route from an app, leaving the route itself in place.

        Raises:
            PlatformCommandError: If the unmapping fails.
        """
        ...

    def stop_app(self, app: str) -> None:
        """Stop all instances of an app.

        Raises:
            PlatformCommandError: If the app cannot be stopped.
        """
        ...

    def get_app(self, name: str) -> AppSummary:
        """Report an app's name, routes and bound services.

        Raises:
            PlatformCommandError: If the app cannot be read.
        """
        ...

    def get_current_space(self) -> str:
        """Return the name of the targeted space.

        Raises:
            PlatformCommandError: If no space is targeted.
        """
        ...
