"""Application commands."""

from __future__ import annotations

import typer

from roer.cli.helpers import (
    MONITOR_OPTION_HELP,
    TIMEOUT_OPTION_HELP,
    client_from_context,
    console,
    run_or_exit,
    run_task,
    task_runner,
)
from roer.operations import DEFAULT_TASK_TIMEOUT, create_application, delete_application
from roer.render import pretty_print_json
from roer.spinnaker.errors import SpinnakerError

app = typer.Typer(help="Application tasks")


@app.command("create")
def create_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Application name"),
    owner_email: str = typer.Argument(..., help="Owner email address"),
    timeout: float = typer.Option(DEFAULT_TASK_TIMEOUT, "--timeout", min=0.1, help=TIMEOUT_OPTION_HELP),
    monitor: bool = typer.Option(True, "--monitor/--no-monitor", help=MONITOR_OPTION_HELP),
) -> None:
    """Create an application."""

    def _run() -> None:
        client = client_from_context(ctx)
        runner = task_runner(client, timeout=timeout, monitor=monitor)
        run_task(lambda: create_application(client.applications, runner, name, owner_email))

    run_or_exit(_run)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Application name"),
    timeout: float = typer.Option(DEFAULT_TASK_TIMEOUT, "--timeout", min=0.1, help=TIMEOUT_OPTION_HELP),
    monitor: bool = typer.Option(True, "--monitor/--no-monitor", help=MONITOR_OPTION_HELP),
) -> None:
    """Delete an application."""

    def _run() -> None:
        client = client_from_context(ctx)
        runner = task_runner(client, timeout=timeout, monitor=monitor)
        run_task(lambda: delete_application(client.applications, runner, name))

    run_or_exit(_run)


@app.command("get")
def get_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Application name"),
) -> None:
    """Print an application's attributes as JSON."""

    def _run() -> None:
        client = client_from_context(ctx)
        try:
            app_info = client.applications.get(name)
        except SpinnakerError as exc:
            raise exc.add_context("fetching app info")

        if app_info is None:
            console.print("App does not exist or insufficient permission")
            raise typer.Exit(1)
        pretty_print_json(app_info, console)

    run_or_exit(_run)


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List application names."""

    def _run() -> None:
        client = client_from_context(ctx)
        try:
            applications = client.applications.list()
        except SpinnakerError as exc:
            raise exc.add_context("fetching application list")

        for application in applications:
            typer.echo(application.name)

    run_or_exit(_run)


__all__ = ["app"]
