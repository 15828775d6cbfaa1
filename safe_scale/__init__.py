"""
safe-scale - Zero-downtime blue-green rollouts for Cloud Foundry apps

Provisions a replacement ("green") for a running app ("blue"), moves every
route across without a 404 window, waits for blue to drain its in-flight
work and then stops it.

Rollout rules:
- Fail loud, stop (no silent self-healing)
- Blue stays reachable until it is stopped
- In-memory route sets never drift from the platform
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
