"""Production adapters for safe-scale ports.

Available adapters:
- CfCliPlatformAdapter: PlatformClientProtocol over the ``cf`` command line
- HttpxEndpointProbe: EndpointProbeProtocol over an httpx client
"""

from safe_scale.infrastructure.adapters.cf_cli_platform import CfCliPlatformAdapter
from safe_scale.infrastructure.adapters.httpx_endpoint_probe import (
    HttpxEndpointProbe,
)

__all__: list[str] = ["CfCliPlatformAdapter", "HttpxEndpointProbe"]
