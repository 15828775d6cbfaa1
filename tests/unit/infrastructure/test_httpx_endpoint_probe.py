"""Unit tests for HttpxEndpointProbe using httpx.MockTransport."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from safe_scale.application.ports.endpoint_probe import EndpointProbeProtocol
from safe_scale.domain.errors.platform import EndpointUnreachableError
from safe_scale.infrastructure.adapters.httpx_endpoint_probe import HttpxEndpointProbe


def _probe(handler) -> HttpxEndpointProbe:
    return HttpxEndpointProbe(timeout=1.0, transport=httpx.MockTransport(handler))


class TestHttpxEndpointProbe:
    """Tests for the status-only GET."""

    def test_implements_protocol(self) -> None:
        with _probe(lambda request: httpx.Response(200)) as probe:
            assert isinstance(probe, EndpointProbeProtocol)

    @pytest.mark.parametrize("status", [200, 204, 404, 503])
    def test_returns_status_code(self, status: int) -> None:
        with _probe(lambda request: httpx.Response(status)) as probe:
            assert probe.get_status("https://foo.cfapps.io/health") == status

    def test_issues_get_to_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        with _probe(handler) as probe:
            probe.get_status("https://temp-foo.cfapps.io/drain")

        assert seen[0].method == "GET"
        assert str(seen[0].url) == "https://temp-foo.cfapps.io/drain"

    def test_does_not_follow_redirects(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": "https://login.example.com"})

        with _probe(handler) as probe:
            assert probe.get_status("https://foo.cfapps.io/health") == 302

    def test_transport_error_raises_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _probe(handler) as probe:
            with pytest.raises(EndpointUnreachableError) as exc_info:
                probe.get_status("https://foo.cfapps.io/health")

        assert exc_info.value.url == "https://foo.cfapps.io/health"
        assert "connection refused" in exc_info.value.reason
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestHttpxEndpointProbeClient:
    """Tests for the underlying client."""

    def test_custom_timeout(self) -> None:
        with HttpxEndpointProbe(timeout=2.0) as probe:
            assert probe._client.timeout.read == 2.0

    def test_get_status_reads_response_status(self) -> None:
        mock_response = MagicMock()
        mock_response.status_code = 204

        with HttpxEndpointProbe() as probe:
            with patch.object(probe._client, "get", return_value=mock_response) as get:
                assert probe.get_status("https://temp-foo.cfapps.io/drain") == 204

        get.assert_called_once_with("https://temp-foo.cfapps.io/drain")
