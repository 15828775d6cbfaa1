"""Endpoint probe port.

Health and drain checks interpret an endpoint purely by its HTTP status
code, so the port exposes nothing else.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EndpointProbeProtocol(Protocol):
    """Protocol for a single, body-less HTTP GET."""

    def get_status(self, url: str) -> int:
        """Issue one GET and return the response status code.

        Args:
            url: Absolute URL to request.

        Returns:
            The HTTP status code.

        Raises:
            EndpointUnreachableError: On any transport-level failure.
        """
        ...
