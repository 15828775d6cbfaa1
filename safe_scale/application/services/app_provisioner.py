"""Green provisioning.

Creates the replacement app in the domain of blue's primary route, then
replicates every one of blue's service bindings onto it, one at a time.
Provisioning stops at the first binding failure: green is never left
silently short of a service.
"""

from __future__ import annotations

from structlog import get_logger

from safe_scale.application.ports.platform_client import PlatformClientProtocol
from safe_scale.domain.errors.platform import PlatformCommandError
from safe_scale.domain.errors.rollout import BindingError, ProvisionError
from safe_scale.domain.models.app_instance import Liveness
from safe_scale.domain.models.rollout_session import RolloutSession
from safe_scale.domain.models.route import Route

logger = get_logger(__name__)


class AppProvisioner:
    """Builds green and binds blue's services to it."""

    def __init__(self, platform: PlatformClientProtocol) -> None:
        self._platform = platform

    def provision(self, session: RolloutSession) -> RolloutSession:
        """Create green and replicate blue's service bindings.

        On success green is LIVE, holds exactly one route
        ``{green.name}.{blue's primary domain}`` and is bound to every
        service blue was bound to at session start.

        Args:
            session: Session in the PROVISION_GREEN stage.

        Returns:
            Session with the provisioned green.

        Raises:
            ProvisionError: If blue has no routes or green cannot be created.
            BindingError: On the first service that cannot be bound. The
                session on the error has green still PROVISIONING.
        """
        primary = session.primary_route
        if primary is None:
            raise ProvisionError(
                session.blue.name,
                message=(
                    f"Can't do blue green deployment because "
                    f"{session.blue.name} has no routes"
                ),
                session=session,
            )

        green = session.green
        try:
            self._platform.create_app(
                green.name, primary.domain, session.target_instance_count
            )
        except PlatformCommandError as e:
            raise ProvisionError(green.name, session=session) from e

        green = green.with_route_mapped(Route(host=green.name, domain=primary.domain))
        session = session.with_green(green)
        logger.info(
            "green_created",
            app=green.name,
            domain=primary.domain,
            instances=session.target_instance_count,
        )

        for service in session.blue_services:
            try:
                self._platform.bind_service(green.name, service)
            except PlatformCommandError as e:
                logger.error("service_bind_failed", app=green.name, service=service)
                raise BindingError(service, green.name, session=session) from e
            green = green.with_service_bound(service)
            session = session.with_green(green)
            logger.info("service_bound", app=green.name, service=service)

        return session.with_green(green.with_liveness(Liveness.LIVE))
