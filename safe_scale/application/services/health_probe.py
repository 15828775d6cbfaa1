"""One-shot readiness check for green.

A deployment with no declared health endpoint is optimistically assumed
ready. Otherwise green is healthy iff a single GET against its first route
answers exactly 200. What an unhealthy result means is the caller's call.
"""

from __future__ import annotations

from structlog import get_logger

from safe_scale.application.ports.endpoint_probe import EndpointProbeProtocol
from safe_scale.domain.errors.platform import EndpointUnreachableError
from safe_scale.domain.models.rollout_session import RolloutSession

logger = get_logger(__name__)

HEALTHY_STATUS = 200


class HealthProbe:
    """Single GET readiness check, no retries."""

    def __init__(self, probe: EndpointProbeProtocol) -> None:
        self._probe = probe

    def endpoint(self, session: RolloutSession) -> str | None:
        """URL that would be probed, or None when there is nothing to probe."""
        route = session.green.primary_route
        if session.health_check_path is None or route is None:
            return None
        return route.url(session.health_check_path)

    def check(self, session: RolloutSession) -> bool:
        """Report whether green is ready to take traffic.

        Returns:
            True when no health path is configured, or the endpoint answered
            200. False on any other status or a transport error.
        """
        if session.health_check_path is None:
            logger.info("health_check_skipped", app=session.green.name)
            return True

        url = self.endpoint(session)
        if url is None:
            logger.warning("health_check_no_route", app=session.green.name)
            return False

        logger.info("health_check_started", app=session.green.name, url=url)
        try:
            status = self._probe.get_status(url)
        except EndpointUnreachableError as e:
            logger.warning("health_check_unreachable", url=url, error=str(e))
            return False

        healthy = status == HEALTHY_STATUS
        logger.info("health_check_finished", url=url, status_code=status, healthy=healthy)
        return healthy
