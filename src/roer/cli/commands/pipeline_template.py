"""Pipeline template commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

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
from roer.files import read_document
from roer.operations import DEFAULT_TASK_TIMEOUT, delete_template, plan_template, publish_template
from roer.render import pretty_print_json
from roer.spinnaker.client import PublishTemplateOptions

logger = logging.getLogger(__name__)

app = typer.Typer(help="Pipeline template tasks")


@app.command("publish")
def publish_command(
    ctx: typer.Context,
    template_file: Path = typer.Argument(..., help="Pipeline template file (YAML or JSON)"),
    skip_plan: bool = typer.Option(False, "--skip-plan", help="Skip planning dependent pipelines"),
    template_id: Optional[str] = typer.Option(None, "--template-id", help="Override the template id"),
    source: Optional[str] = typer.Option(None, "--source", help="Override the template source"),
    update: bool = typer.Option(False, "--update", "-u", hidden=True, help="Deprecated"),
    timeout: float = typer.Option(DEFAULT_TASK_TIMEOUT, "--timeout", min=0.1, help=TIMEOUT_OPTION_HELP),
    monitor: bool = typer.Option(True, "--monitor/--no-monitor", help=MONITOR_OPTION_HELP),
) -> None:
    """Create or update a pipeline template."""
    if update:
        logger.warning("--update is deprecated; publish creates or updates the template as needed")

    def _run() -> None:
        template = read_document(template_file)
        client = client_from_context(ctx)
        runner = task_runner(client, timeout=timeout, monitor=monitor)
        options = PublishTemplateOptions(skip_plan=skip_plan, template_id=template_id, source=source)
        run_task(lambda: publish_template(client.templates, runner, template, options))

    run_or_exit(_run)


@app.command("plan")
def plan_command(
    ctx: typer.Context,
    config_file: Path = typer.Argument(..., help="Pipeline template configuration file"),
    template_file: Optional[Path] = typer.Option(
        None, "--template", "-t", help="Plan against this local template instead of the published one"
    ),
) -> None:
    """Validate a configuration and print the resolved pipeline JSON."""

    def _run() -> None:
        configuration = read_document(config_file)
        template = read_document(template_file) if template_file is not None else None
        client = client_from_context(ctx)
        plan = plan_template(client.templates, configuration, template)
        pretty_print_json(plan, console)

    run_or_exit(_run)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    template_id: str = typer.Argument(..., help="Pipeline template id"),
    timeout: float = typer.Option(DEFAULT_TASK_TIMEOUT, "--timeout", min=0.1, help=TIMEOUT_OPTION_HELP),
    monitor: bool = typer.Option(True, "--monitor/--no-monitor", help=MONITOR_OPTION_HELP),
) -> None:
    """Delete a pipeline template."""

    def _run() -> None:
        client = client_from_context(ctx)
        runner = task_runner(client, timeout=timeout, monitor=monitor)
        run_task(lambda: delete_template(client.templates, runner, template_id))

    run_or_exit(_run)


__all__ = ["app"]
