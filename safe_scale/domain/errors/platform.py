"""Platform and endpoint errors.

These are raised by infrastructure adapters. Rollout services translate them
into stage errors (``raise ... from``) so the operator sees what the rollout
was doing, while the original platform error stays on ``__cause__``.
"""

from safe_scale.domain.exceptions import SafeScaleError


class PlatformCommandError(SafeScaleError):
    """Raised when the platform rejects an operation.

    Attributes:
        operation: Name of the operation (e.g. ``"map-route"``).
        detail: What the platform reported, if anything.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Platform operation {operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class EndpointUnreachableError(SafeScaleError):
    """Raised when an HTTP endpoint cannot be reached at all.

    Attributes:
        url: The endpoint.
        reason: Transport-level failure description.
    """

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Could not reach {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ResourceLookupError(SafeScaleError, LookupError):
    """Base class for platform resources that cannot be found."""

    pass


class AppNotFoundError(ResourceLookupError):
    """Raised when the app to roll out cannot be accessed."""

    def __init__(self, app_name: str) -> None:
        self.app_name = app_name
        super().__init__(f"Could not access {app_name} in Cloud Foundry")


class SpaceNotFoundError(ResourceLookupError):
    """Raised when the current target space cannot be determined."""

    def __init__(self, message: str = "Could not find space in Cloud Foundry") -> None:
        super().__init__(message)
