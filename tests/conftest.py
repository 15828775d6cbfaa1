"""
Pytest configuration and shared fixtures for safe-scale tests.

Testing Standards:
- Unit tests go in tests/unit/, mirroring the package layout
- Integration tests go in tests/integration/ and drive the orchestrator
  end to end against the in-memory platform and probe stubs
- No test touches a real platform or network
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from safe_scale.domain.models.app_instance import AppInstance, Liveness
from safe_scale.domain.models.rollout_session import RolloutSession
from safe_scale.domain.models.route import Route
from safe_scale.infrastructure.stubs.endpoint_probe_stub import EndpointProbeStub
from safe_scale.infrastructure.stubs.platform_client_stub import PlatformClientStub

DOMAIN = "cfapps.io"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from safe_scale import __version__

    return __version__


@pytest.fixture
def blue_route() -> Route:
    return Route(host="foo", domain=DOMAIN)


@pytest.fixture
def platform(blue_route: Route) -> PlatformClientStub:
    """Stub platform with a running ``foo`` app bound to ``db``."""
    stub = PlatformClientStub(space="development")
    stub.add_app("foo", routes=[blue_route], services=["db"])
    return stub


@pytest.fixture
def probe() -> EndpointProbeStub:
    return EndpointProbeStub()


@pytest.fixture
def make_session(blue_route: Route):
    """Factory for a fresh session with blue ``foo`` on ``foo.cfapps.io``."""

    def _make(
        routes: tuple[Route, ...] | None = None,
        services: tuple[str, ...] = ("db",),
        health_check_path: str | None = None,
        drain_check_path: str | None = None,
        drain_timeout: timedelta = timedelta(seconds=120),
    ) -> RolloutSession:
        blue = AppInstance(
            name="foo",
            routes=routes if routes is not None else (blue_route,),
            bound_services=frozenset(services),
            liveness=Liveness.LIVE,
        )
        return RolloutSession.start(
            rollout_id="rollout-1",
            space="development",
            blue=blue,
            green_name="new-foo",
            blue_services=services,
            health_check_path=health_check_path,
            drain_check_path=drain_check_path,
            drain_timeout=drain_timeout,
        )

    return _make


class FakeClock:
    """Monotonic clock that only moves when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
