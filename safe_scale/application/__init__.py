"""Application layer: ports and rollout services."""
