"""Rollout configuration.

This module defines the knobs of a rollout: green's size, the optional
health and drain paths, the drain deadline and poll interval, and the
failure policy. Defaults can be overridden through environment variables;
command-line flags are layered on top by the CLI.

Environment Variables:
- SAFE_SCALE_INSTANCE_COUNT: Instances for green (default: 1, min: 1)
- SAFE_SCALE_DRAIN_TIMEOUT_SECONDS: Drain deadline (default: 120, min: 0, max: 3600)
- SAFE_SCALE_POLL_INTERVAL_SECONDS: Drain poll interval (default: 3, must be > 0, max: 60)
- SAFE_SCALE_HTTP_TIMEOUT_SECONDS: Per-request HTTP timeout (default: 10)
- SAFE_SCALE_CF_BINARY: ``cf`` executable used by the CLI adapter (default: cf)
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any

from safe_scale.domain.errors.rollout import ArgumentError


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get numeric environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if math.isfinite(parsed) else default


# =============================================================================
# Green sizing
# =============================================================================

DEFAULT_INSTANCE_COUNT = 1

MIN_INSTANCE_COUNT = 1

# Prefix for the derived green name (blue "foo" -> green "new-foo")
GREEN_NAME_PREFIX = "new-"

# =============================================================================
# Drain monitoring
# =============================================================================

DEFAULT_DRAIN_TIMEOUT_SECONDS = 120.0

MAX_DRAIN_TIMEOUT_SECONDS = 3600.0

DEFAULT_POLL_INTERVAL_SECONDS = 3.0

MAX_POLL_INTERVAL_SECONDS = 60.0

# =============================================================================
# HTTP and platform access
# =============================================================================

DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0

DEFAULT_CF_BINARY = "cf"


def derive_green_name(blue_name: str) -> str:
    """Name for the replacement of ``blue_name``."""
    return f"{GREEN_NAME_PREFIX}{blue_name}"


def _normalize_path(path: str | None) -> str | None:
    if not path:
        return None
    return path if path.startswith("/") else f"/{path}"


@dataclass(frozen=True)
class RolloutConfig:
    """Configuration for one rollout.

    Attributes:
        instance_count: Number of instances for green.
        health_check_path: Path probed on green before migration. None skips
            the check (green is assumed ready).
        drain_check_path: Path polled on blue before it is stopped. None
            means a hard cut-over.
        drain_timeout_seconds: Deadline for blue to report it has drained.
        poll_interval_seconds: Wait between drain polls.
        http_timeout_seconds: Timeout for each health or drain request.
        green_name: Explicit name for green. None derives ``new-<blue>``.
        abort_on_unhealthy: If True an unhealthy green halts the rollout,
            otherwise a warning is logged and the rollout continues.
        restore_on_failure: If True, a failure during route migration or
            drain hands blue's original routes back to blue.
        cf_binary: ``cf`` executable used by the CLI adapter.
    """

    instance_count: int = DEFAULT_INSTANCE_COUNT
    health_check_path: str | None = None
    drain_check_path: str | None = None
    drain_timeout_seconds: float = DEFAULT_DRAIN_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    green_name: str | None = None
    abort_on_unhealthy: bool = True
    restore_on_failure: bool = False
    cf_binary: str = DEFAULT_CF_BINARY

    def __post_init__(self) -> None:
        """Validate and normalize configuration values."""
        if self.instance_count < MIN_INSTANCE_COUNT:
            raise ArgumentError(
                f"instance_count must be at least {MIN_INSTANCE_COUNT}, "
                f"got {self.instance_count}"
            )
        if not 0 <= self.drain_timeout_seconds <= MAX_DRAIN_TIMEOUT_SECONDS:
            raise ArgumentError(
                f"drain_timeout_seconds must be between 0 and "
                f"{MAX_DRAIN_TIMEOUT_SECONDS:g}, got {self.drain_timeout_seconds:g}"
            )
        if not 0 < self.poll_interval_seconds <= MAX_POLL_INTERVAL_SECONDS:
            raise ArgumentError(
                f"poll_interval_seconds must be above 0 and at most "
                f"{MAX_POLL_INTERVAL_SECONDS:g}, got {self.poll_interval_seconds:g}"
            )
        if self.http_timeout_seconds <= 0:
            raise ArgumentError(
                f"http_timeout_seconds must be positive, got {self.http_timeout_seconds:g}"
            )
        if self.green_name is not None and not self.green_name.strip():
            raise ArgumentError("green_name must not be blank")
        # frozen=True prevents normal assignment
        object.__setattr__(
            self, "health_check_path", _normalize_path(self.health_check_path)
        )
        object.__setattr__(
            self, "drain_check_path", _normalize_path(self.drain_check_path)
        )

    @property
    def drain_timeout(self) -> timedelta:
        return timedelta(seconds=self.drain_timeout_seconds)

    def green_name_for(self, blue_name: str) -> str:
        """Resolve green's name for a given blue.

        Raises:
            ArgumentError: If the name would collide with blue's.
        """
        name = self.green_name or derive_green_name(blue_name)
        if name == blue_name:
            raise ArgumentError(f"New app name must differ from {blue_name}")
        return name

    def with_overrides(self, **overrides: Any) -> RolloutConfig:
        """Return a copy with every non-None override applied.

        Used by the CLI to layer flags over environment defaults.
        """
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_environment(cls) -> RolloutConfig:
        """Create config from environment variables with defaults.

        Returns:
            RolloutConfig with values from environment or defaults.
        """
        instance_count = _get_int_env(
            "SAFE_SCALE_INSTANCE_COUNT", DEFAULT_INSTANCE_COUNT
        )
        instance_count = max(MIN_INSTANCE_COUNT, instance_count)

        drain_timeout = _get_float_env(
            "SAFE_SCALE_DRAIN_TIMEOUT_SECONDS", DEFAULT_DRAIN_TIMEOUT_SECONDS
        )
        # Clamp to valid range
        drain_timeout = max(0.0, min(drain_timeout, MAX_DRAIN_TIMEOUT_SECONDS))

        poll_interval = _get_float_env(
            "SAFE_SCALE_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
        )
        poll_interval = min(poll_interval, MAX_POLL_INTERVAL_SECONDS)
        if poll_interval <= 0:
            poll_interval = DEFAULT_POLL_INTERVAL_SECONDS

        http_timeout = _get_float_env(
            "SAFE_SCALE_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS
        )
        if http_timeout <= 0:
            http_timeout = DEFAULT_HTTP_TIMEOUT_SECONDS

        return cls(
            instance_count=instance_count,
            drain_timeout_seconds=drain_timeout,
            poll_interval_seconds=poll_interval,
            http_timeout_seconds=http_timeout,
            cf_binary=os.environ.get("SAFE_SCALE_CF_BINARY", DEFAULT_CF_BINARY),
        )


# Default production config
DEFAULT_ROLLOUT_CONFIG = RolloutConfig()

# Testing config: near-zero wait between drain polls, short deadline
TEST_ROLLOUT_CONFIG = RolloutConfig(
    drain_timeout_seconds=5.0,
    poll_interval_seconds=0.01,
    http_timeout_seconds=1.0,
)
