"""Platform adapter that drives the Cloud Foundry command line.

Each platform operation is one ``cf`` invocation. The adapter relies on the
CLI's own login and target state; it never handles credentials or speaks
the management API directly (``cf curl`` is used for the one read the CLI
has no machine-readable command for).
"""

from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence

import structlog

from safe_scale.config.rollout_config import DEFAULT_CF_BINARY
from safe_scale.domain.errors.platform import PlatformCommandError
from safe_scale.domain.models.app_instance import AppSummary
from safe_scale.domain.models.route import Route

log = structlog.get_logger()

# Pushing stages and starts the app, which is far slower than route changes
DEFAULT_PUSH_TIMEOUT_SECONDS = 600.0
DEFAULT_COMMAND_TIMEOUT_SECONDS = 120.0


class CfCliPlatformAdapter:
    """PlatformClientProtocol implementation over the ``cf`` CLI.

    Usage:
        platform = CfCliPlatformAdapter()
        summary = platform.get_app("foo")
        platform.map_route("new-foo", "cfapps.io", "foo")
    """

    def __init__(
        self,
        cf_binary: str = DEFAULT_CF_BINARY,
        push_timeout: float = DEFAULT_PUSH_TIMEOUT_SECONDS,
        command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the adapter.

        Args:
            cf_binary: Path or name of the ``cf`` executable.
            push_timeout: Timeout in seconds for ``cf push``.
            command_timeout: Timeout in seconds for every other command.
        """
        self._cf = cf_binary
        self._push_timeout = push_timeout
        self._command_timeout = command_timeout

    def _run(self, args: Sequence[str], timeout: float | None = None) -> str:
        """Run one ``cf`` command and return its stdout.

        Raises:
            PlatformCommandError: If the command cannot run, times out or
                exits non-zero.
        """
        operation = args[0]
        command = [self._cf, *args]
        log.debug("cf_command", command=" ".join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=timeout or self._command_timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise PlatformCommandError(operation, f"{self._cf} not found") from e
        except subprocess.TimeoutExpired as e:
            raise PlatformCommandError(
                operation, f"timed out after {e.timeout:g}s"
            ) from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            log.warning(
                "cf_command_failed",
                command=" ".join(command),
                returncode=result.returncode,
                detail=detail,
            )
            raise PlatformCommandError(operation, detail)
        return result.stdout

    def create_app(self, name: str, domain: str, instance_count: int) -> str:
        self._run(
            ["push", name, "-i", str(instance_count), "--hostname", name, "-d", domain],
            timeout=self._push_timeout,
        )
        return name

    def bind_service(self, app: str, service: str) -> None:
        self._run(["bind-service", app, service])

    def create_route(self, space: str, domain: str, host: str) -> None:
        self._run(["create-route", space, domain, "--hostname", host])

    def delete_route(self, domain: str, host: str) -> None:
        self._run(["delete-route", domain, "--hostname", host, "-f"])

    def map_route(self, app: str, domain: str, host: str) -> None:
        self._run(["map-route", app, domain, "--hostname", host])

    def unmap_route(self, app: str, domain: str, host: str) -> None:
        self._run(["unmap-route", app, domain, "--hostname", host])

    def stop_app(self, app: str) -> None:
        self._run(["stop", app])

    def get_app(self, name: str) -> AppSummary:
        """Read an app's routes and bound services.

        Raises:
            PlatformCommandError: If the app is unknown or the summary cannot
                be parsed.
        """
        guid = self._run(["app", name, "--guid"]).strip()
        if not guid:
            raise PlatformCommandError("app", f"no guid reported for {name}")

        raw = self._run(["curl", f"/v2/apps/{guid}/summary"])
        try:
            summary = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PlatformCommandError("curl", f"invalid app summary: {e.msg}") from e
        if not isinstance(summary, dict) or "error_code" in summary:
            detail = summary.get("description", "") if isinstance(summary, dict) else ""
            raise PlatformCommandError("curl", detail or "unexpected app summary")

        try:
            routes = tuple(
                Route(host=route.get("host", ""), domain=route["domain"]["name"])
                for route in summary.get("routes") or []
            )
            services = tuple(
                service["name"] for service in summary.get("services") or []
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise PlatformCommandError("curl", "unexpected app summary") from e
        return AppSummary(
            name=summary.get("name", name),
            routes=routes,
            bound_services=services,
        )

    def get_current_space(self) -> str:
        """Read the targeted space from ``cf target``.

        Raises:
            PlatformCommandError: If no space is targeted.
        """
        output = self._run(["target"])
        for line in output.splitlines():
            key, _, value = line.partition(":")
            if key.strip().lower() == "space" and value.strip():
                return value.strip()
        raise PlatformCommandError("target", "no space targeted")
