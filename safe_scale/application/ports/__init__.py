"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the rollout services testable.

Available ports:
- PlatformClientProtocol: App, route and service operations on the platform
- EndpointProbeProtocol: Status-only HTTP GET against an app endpoint
"""

from safe_scale.application.ports.endpoint_probe import EndpointProbeProtocol
from safe_scale.application.ports.platform_client import PlatformClientProtocol

__all__: list[str] = ["EndpointProbeProtocol", "PlatformClientProtocol"]
