"""HTTP endpoint probe backed by httpx.

Health and drain endpoints are read by status code only, so the probe does
not follow redirects (a 302 is "anything else", not a 200) and discards the
body.
"""

from __future__ import annotations

import httpx
import structlog

from safe_scale.config.rollout_config import DEFAULT_HTTP_TIMEOUT_SECONDS
from safe_scale.domain.errors.platform import EndpointUnreachableError

log = structlog.get_logger()


class HttpxEndpointProbe:
    """EndpointProbeProtocol implementation using a synchronous httpx client.

    Usage:
        with HttpxEndpointProbe(timeout=10.0) as probe:
            status = probe.get_status("https://foo.cfapps.io/health")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the probe.

        Args:
            timeout: Request timeout in seconds.
            transport: Optional transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        )

    def __enter__(self) -> HttpxEndpointProbe:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_status(self, url: str) -> int:
        """Issue one GET and return the status code.

        Raises:
            EndpointUnreachableError: On connection, TLS or timeout failures.
        """
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            log.warning("endpoint_unreachable", url=url, error=str(e))
            raise EndpointUnreachableError(url, reason=str(e)) from e
        log.debug("endpoint_probed", url=url, status_code=response.status_code)
        return response.status_code

    def close(self) -> None:
        """Close HTTP client."""
        self._client.close()
