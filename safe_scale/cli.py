"""Command line interface for safe-scale.

Commands:
    safe-scale    Replace a running app with a new copy, without downtime

Example:
    safescale safe-scale foo -i 3 --health-check-path /health \\
        --drain-check-path /drain --drain-timeout 300
"""

import json
from enum import Enum
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from safe_scale import __version__
from safe_scale.application.services.rollout_orchestrator import RolloutReport
from safe_scale.bootstrap.logging import configure_structlog
from safe_scale.bootstrap.rollout import build_endpoint_probe, build_orchestrator
from safe_scale.config.rollout_config import RolloutConfig
from safe_scale.domain.errors.rollout import ArgumentError


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


class LogFormat(str, Enum):
    """Log renderer options."""

    console = "console"
    json = "json"


app = typer.Typer(
    name="safescale",
    help="Zero-downtime blue-green rollouts for Cloud Foundry apps",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"safescale version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """safe-scale rollout toolkit."""
    pass


@app.command("safe-scale")
def safe_scale(
    app_name: str = typer.Argument(
        ...,
        help="Name of the running app to replace",
    ),
    instance_count: Optional[int] = typer.Option(
        None,
        "--instance-count",
        "-i",
        help="Number of instances for the new app (default: 1)",
    ),
    health_check_path: Optional[str] = typer.Option(
        None,
        "--health-check-path",
        help="Path that must answer 200 on the new app before routes move",
    ),
    drain_check_path: Optional[str] = typer.Option(
        None,
        "--drain-check-path",
        help="Path on the old app that answers 204 once it has drained",
    ),
    drain_timeout: Optional[float] = typer.Option(
        None,
        "--drain-timeout",
        "--drain-timeout-seconds",
        help="Seconds the old app may take to drain (default: 120)",
    ),
    new_app_name: Optional[str] = typer.Option(
        None,
        "--new-app-name",
        help="Name for the new app (default: new-APP_NAME)",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between drain polls (default: 3)",
    ),
    allow_unhealthy: bool = typer.Option(
        False,
        "--allow-unhealthy",
        help="Continue with a warning when the health check fails",
    ),
    restore_on_failure: bool = typer.Option(
        False,
        "--restore-on-failure",
        help="Put routes back on the old app if migration or draining fails",
    ),
    log_format: LogFormat = typer.Option(
        LogFormat.console,
        "--log-format",
        help="Log format: console or json",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
) -> None:
    """Replace APP_NAME with a new copy without dropping requests.

    Pushes new-APP_NAME, binds it to every service APP_NAME uses, moves
    every route across, waits for APP_NAME to drain and then stops it.

    Example:
        safescale safe-scale foo -i 2 --drain-check-path /drain
    """
    # SAFE_SCALE_* defaults and LOG_LEVEL may come from a .env file in the
    # working directory
    load_dotenv()
    configure_structlog(log_format.value)

    try:
        config = RolloutConfig.from_environment().with_overrides(
            instance_count=instance_count,
            health_check_path=health_check_path,
            drain_check_path=drain_check_path,
            drain_timeout_seconds=drain_timeout,
            poll_interval_seconds=poll_interval,
            green_name=new_app_name,
            abort_on_unhealthy=False if allow_unhealthy else None,
            restore_on_failure=True if restore_on_failure else None,
        )
    except ArgumentError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=1)

    with build_endpoint_probe(config) as probe:
        orchestrator = build_orchestrator(config, probe=probe)
        report = orchestrator.run(app_name)

    _output_report(report, output_format.value)
    if not report.succeeded:
        raise typer.Exit(code=1)


def _output_report(report: RolloutReport, output_format: str) -> None:
    """Output the rollout report in requested format."""
    session = report.session

    if output_format == "json":
        output = {
            "succeeded": report.succeeded,
            "rollout_id": session.rollout_id if session else None,
            "blue": session.blue.name if session else None,
            "green": session.green.name if session else None,
            "stage": session.stage.value if session else None,
            "failed_stage": report.failed_stage.value if report.failed_stage else None,
            "error": str(report.error) if report.error else None,
            "restored": report.restored,
            "restore_error": str(report.restore_error) if report.restore_error else None,
        }
        console.print_json(json.dumps(output))
        return

    if report.succeeded and session is not None:
        routes = ", ".join(route.fqdn for route in session.green.routes)
        console.print(
            f"[green]OK[/green] - {session.green.name} now serves {routes}; "
            f"{session.blue.name} is stopped",
            soft_wrap=True,
        )
        return

    console.print(f"[red]Error:[/red] {escape(str(report.error))}", soft_wrap=True)
    if report.failed_stage is not None:
        console.print(f"  Failed stage: {report.failed_stage.value}", style="dim")
    if report.restored and session is not None:
        console.print(
            f"[yellow]Routes restored to {session.blue.name}[/yellow]", soft_wrap=True
        )
    if report.restore_error is not None:
        console.print(
            f"[red]Restore failed:[/red] {escape(str(report.restore_error))}",
            soft_wrap=True,
        )
