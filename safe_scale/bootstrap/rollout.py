"""Bootstrap wiring for the rollout orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from safe_scale.application.services.rollout_orchestrator import RolloutOrchestrator
from safe_scale.config.rollout_config import RolloutConfig
from safe_scale.infrastructure.adapters.cf_cli_platform import CfCliPlatformAdapter
from safe_scale.infrastructure.adapters.httpx_endpoint_probe import HttpxEndpointProbe

if TYPE_CHECKING:
    from safe_scale.application.ports.endpoint_probe import EndpointProbeProtocol
    from safe_scale.application.ports.platform_client import PlatformClientProtocol


def build_platform_client(config: RolloutConfig) -> PlatformClientProtocol:
    """Create the platform client for the configured ``cf`` binary."""
    return CfCliPlatformAdapter(cf_binary=config.cf_binary)


def build_endpoint_probe(config: RolloutConfig) -> HttpxEndpointProbe:
    """Create the HTTP probe. The caller owns it and must close it."""
    return HttpxEndpointProbe(timeout=config.http_timeout_seconds)


def build_orchestrator(
    config: RolloutConfig,
    platform: PlatformClientProtocol | None = None,
    probe: EndpointProbeProtocol | None = None,
) -> RolloutOrchestrator:
    """Wire a rollout orchestrator.

    Args:
        config: Rollout configuration.
        platform: Platform client. Defaults to the ``cf`` CLI adapter.
        probe: Endpoint probe. Defaults to an httpx probe.

    Returns:
        A RolloutOrchestrator ready to run.
    """
    return RolloutOrchestrator(
        platform or build_platform_client(config),
        probe or build_endpoint_probe(config),
        config,
    )


__all__ = ["build_endpoint_probe", "build_orchestrator", "build_platform_client"]
