"""Configuration module for safe-scale.

Available Configurations:
- RolloutConfig: Green sizing, health/drain paths, drain deadline, failure policy
"""

from safe_scale.config.rollout_config import (
    DEFAULT_ROLLOUT_CONFIG,
    TEST_ROLLOUT_CONFIG,
    RolloutConfig,
    derive_green_name,
)

__all__ = [
    "RolloutConfig",
    "DEFAULT_ROLLOUT_CONFIG",
    "TEST_ROLLOUT_CONFIG",
    "derive_green_name",
]
