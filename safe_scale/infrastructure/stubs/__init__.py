"""Infrastructure stubs for development and testing.

Available stubs:
- PlatformClientStub: In-memory platform with apps, a route table and
  injectable operation failures
- EndpointProbeStub: Scripted HTTP status sequences per URL

WARNING: These stubs are NOT for production use.
Production implementations are in safe_scale/infrastructure/adapters/.
"""

from safe_scale.infrastructure.stubs.endpoint_probe_stub import EndpointProbeStub
from safe_scale.infrastructure.stubs.platform_client_stub import (
    PlatformClientStub,
    StubApp,
)

__all__: list[str] = ["EndpointProbeStub", "PlatformClientStub", "StubApp"]
