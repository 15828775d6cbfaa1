"""Endpoint probe stub for testing.

Returns scripted status codes per URL so health and drain checks can be
exercised without a network.
"""

from __future__ import annotations

from collections import defaultdict

from safe_scale.domain.errors.platform import EndpointUnreachableError

DEFAULT_STATUS = 200


class EndpointProbeStub:
    """Stub implementation of EndpointProbeProtocol.

    Each URL has a script of responses consumed in order; the last entry
    repeats once the script is exhausted. A response is a status code, or
    ``None`` for a transport failure.

    Example:
        >>> probe = EndpointProbeStub()
        >>> probe.set_responses("https://foo.cfapps.io/drain", [200, 200, 204])
        >>> probe.get_status("https://foo.cfapps.io/drain")
        200
        >>> probe.request_count("https://foo.cfapps.io/drain")
        1
    """

    def __init__(self, default_status: int = DEFAULT_STATUS) -> None:
        """Initialize the stub.

        Args:
            default_status: Status returned for URLs without a script.
        """
        self._default_status = default_status
        self._scripts: dict[str, list[int | None]] = {}
        self._positions: dict[str, int] = defaultdict(int)
        self.requests: list[str] = []

    def set_responses(self, url: str, responses: list[int | None]) -> None:
        """Script the responses for ``url``.

        Args:
            url: Exact URL the probe will be asked for.
            responses: Status codes in order; ``None`` means unreachable.
        """
        if not responses:
            raise ValueError("responses must not be empty")
        self._scripts[url] = list(responses)
        self._positions[url] = 0

    def set_unreachable(self, url: str) -> None:
        self.set_responses(url, [None])

    def get_status(self, url: str) -> int:
        self.requests.append(url)
        script = self._scripts.get(url)
        if script is None:
            return self._default_status

        position = self._positions[url]
        response = script[min(position, len(script) - 1)]
        self._positions[url] = position + 1
        if response is None:
            raise EndpointUnreachableError(url, reason="connection refused")
        return response

    def request_count(self, url: str) -> int:
        return self.requests.count(url)
