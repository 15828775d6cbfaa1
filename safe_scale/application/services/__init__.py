"""Application services for safe-scale.

One service per rollout stage, plus the orchestrator that drives them:
- AppProvisioner: creates green and replicates blue's service bindings
- HealthProbe: one-shot readiness check against green
- RouteMigrator: moves blue's routes onto green via a temporary route
- DrainMonitor: polls blue's drain endpoint until it reports 204
- Decommissioner: orphans blue's temporary route and stops blue
- RouteRestorer: opt-in restore of blue's routes after a failure
- RolloutOrchestrator: the stage machine
"""

from safe_scale.application.services.app_provisioner import AppProvisioner
from safe_scale.application.services.decommissioner import Decommissioner
from safe_scale.application.services.drain_monitor import DrainMonitor
from safe_scale.application.services.health_probe import HealthProbe
from safe_scale.application.services.rollout_orchestrator import (
    RolloutOrchestrator,
    RolloutReport,
)
from safe_scale.application.services.route_migrator import RouteMigrator
from safe_scale.application.services.route_restorer import RouteRestorer

__all__: list[str] = [
    "AppProvisioner",
    "Decommissioner",
    "DrainMonitor",
    "HealthProbe",
    "RolloutOrchestrator",
    "RolloutReport",
    "RouteMigrator",
    "RouteRestorer",
]
