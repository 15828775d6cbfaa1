"""Route value object.

A route is a ``{host, domain}`` pair through which external traffic reaches
an application. Routes are mapping targets: they are not owned by any one
app, and during a rollout the same route may be mapped to blue and green at
the same time.
"""

from __future__ import annotations

from dataclasses import dataclass

TEMPORARY_ROUTE_PREFIX = "temp-"


@dataclass(frozen=True, eq=True)
class Route:
    """A ``{host, domain}`` pair. Two routes are equal iff both fields match.

    Attributes:
        host: Hostname label (e.g. ``"foo"``).
        domain: Shared or private domain (e.g. ``"cfapps.io"``).
    """

    host: str
    domain: str

    @property
    def fqdn(self) -> str:
        """Fully qualified name, ``host.domain``."""
        return f"{self.host}.{self.domain}"

    def url(self, path: str = "") -> str:
        """Build the HTTPS URL for a path on this route.

        Args:
            path: Absolute path such as ``/health``. Empty for the root.

        Returns:
            ``https://host.domain`` followed by the path.
        """
        return f"https://{self.fqdn}{path}"

    def temporary(self) -> Route:
        """Return the temporary route that keeps this route's owner reachable."""
        return Route(host=f"{TEMPORARY_ROUTE_PREFIX}{self.host}", domain=self.domain)

    def __str__(self) -> str:
        return self.fqdn
