"""Drain monitoring for blue.

Before blue is stopped, its drain endpoint is polled through the temporary
route until it reports that no client is mid-transaction. The signal is a
hard external contract:

- 204 No Content: drained, stop polling.
- 200 OK: work still pending, wait one interval and poll again.
- anything else, or a transport error: fatal, stop polling.

The loop is bounded by the session's drain timeout, measured on a monotonic
clock from stage entry. Clock and sleep are injectable so the loop can be
tested without waiting.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from structlog import get_logger

from safe_scale.application.ports.endpoint_probe import EndpointProbeProtocol
from safe_scale.config.rollout_config import DEFAULT_POLL_INTERVAL_SECONDS
from safe_scale.domain.errors.platform import EndpointUnreachableError
from safe_scale.domain.errors.rollout import DrainCheckError, DrainTimeoutError
from safe_scale.domain.models.rollout_session import RolloutSession

logger = get_logger(__name__)

DRAINED_STATUS = 204
PENDING_STATUS = 200


class DrainMonitor:
    """Blocking, single-threaded poll loop with an explicit deadline."""

    def __init__(
        self,
        probe: EndpointProbeProtocol,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the monitor.

        Args:
            probe: Endpoint probe used for each poll.
            poll_interval: Seconds to wait after a 200 before polling again.
            clock: Monotonic clock in seconds.
            sleep: Function used to wait between polls.
        """
        self._probe = probe
        self._poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    def endpoint(self, session: RolloutSession) -> str | None:
        """Drain URL on blue's reachable route, or None with no drain path."""
        route = session.temporary_route or session.blue.primary_route
        if session.drain_check_path is None or route is None:
            return None
        return route.url(session.drain_check_path)

    def await_drained(self, session: RolloutSession) -> RolloutSession:
        """Block until blue reports it has drained.

        Without a drain path this is a no-op (hard cut-over).

        Args:
            session: Session whose blue is DRAINING.

        Returns:
            The session, unchanged.

        Raises:
            DrainCheckError: On a status other than 200/204 or a transport
                error. Polling stops immediately.
            DrainTimeoutError: If no 204 arrives before the drain timeout.
        """
        if session.drain_check_path is None:
            logger.info("drain_skipped", app=session.blue.name)
            return session

        url = self.endpoint(session)
        timeout = session.drain_timeout.total_seconds()
        if url is None:
            raise DrainCheckError("<no route>", session.blue.name, session=session)

        logger.info("drain_started", app=session.blue.name, url=url, timeout=timeout)
        started = self._clock()
        polls = 0
        while self._clock() - started < timeout:
            polls += 1
            try:
                status = self._probe.get_status(url)
            except EndpointUnreachableError as e:
                raise DrainCheckError(url, session.blue.name, session=session) from e

            logger.debug("drain_poll", url=url, poll=polls, status_code=status)
            if status == DRAINED_STATUS:
                logger.info("drain_complete", app=session.blue.name, polls=polls)
                return session
            if status != PENDING_STATUS:
                raise DrainCheckError(
                    url, session.blue.name, status_code=status, session=session
                )
            self._sleep(self._poll_interval)

        logger.error("drain_timed_out", url=url, polls=polls, timeout=timeout)
        raise DrainTimeoutError(url, session.blue.name, timeout, session=session)
