"""Task inspection commands."""

from __future__ import annotations

import typer
from rich.markup import escape

from roer.cli.helpers import (
    TIMEOUT_OPTION_HELP,
    client_from_context,
    console,
    run_or_exit,
    task_runner,
)
from roer.operations import DEFAULT_TASK_TIMEOUT
from roer.spinnaker.errors import SpinnakerError

app = typer.Typer(help="Inspect submitted tasks")


@app.command("get")
def get_command(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Task reference, e.g. /tasks/01ABC"),
) -> None:
    """Print the current execution state of a task."""

    def _run() -> None:
        client = client_from_context(ctx)
        try:
            execution = client.tasks.get_task(ref)
        except SpinnakerError as exc:
            raise exc.add_context("fetching task")
        console.print_json(data=execution.to_json_dict())

    run_or_exit(_run)


@app.command("wait")
def wait_command(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Task reference, e.g. /tasks/01ABC"),
    timeout: float = typer.Option(DEFAULT_TASK_TIMEOUT, "--timeout", min=0.1, help=TIMEOUT_OPTION_HELP),
) -> None:
    """Wait for a task to complete and report its status."""

    def _run() -> None:
        client = client_from_context(ctx)
        runner = task_runner(client, timeout=timeout)
        with console.status("Waiting for task to complete..."):
            outcome = runner.wait(ref, "waiting for task")
        console.print(f"[green]Task completed[/green] ({escape(outcome.status)})")

    run_or_exit(_run)


__all__ = ["app"]
