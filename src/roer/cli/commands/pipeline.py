"""Pipeline config commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from roer.cli.helpers import client_from_context, console, run_or_exit
from roer.files import read_document
from roer.operations import save_pipeline, save_pipeline_json
from roer.spinnaker.errors import SpinnakerError

app = typer.Typer(help="Pipeline tasks")


@app.command("save")
def save_command(
    ctx: typer.Context,
    config_file: Path = typer.Argument(..., help="Pipeline template configuration file (YAML)"),
) -> None:
    """Create or update a templated pipeline from a configuration file."""

    def _run() -> None:
        document = read_document(config_file)
        client = client_from_context(ctx)
        saved = save_pipeline(client.pipelines, document)
        label = escape(f"{saved.application}/{saved.name}")
        console.print(f"[green]Saved pipeline[/green] {label}", highlight=False)

    run_or_exit(_run)


@app.command("save-json")
def save_json_command(
    ctx: typer.Context,
    json_file: Path = typer.Argument(..., help="Pipeline config JSON file"),
) -> None:
    """Create or update a pipeline from its JSON definition."""

    def _run() -> None:
        document = read_document(json_file)
        client = client_from_context(ctx)
        saved = save_pipeline_json(client.pipelines, document)
        label = escape(f"{saved.application}/{saved.name}")
        console.print(f"[green]Saved pipeline[/green] {label}", highlight=False)

    run_or_exit(_run)


@app.command("list")
def list_command(
    ctx: typer.Context,
    application: str = typer.Argument(..., help="Application name"),
) -> None:
    """List the pipeline names of an application."""

    def _run() -> None:
        client = client_from_context(ctx)
        try:
            pipelines = client.pipelines.list_configs(application)
        except SpinnakerError as exc:
            raise exc.add_context("fetching pipelines")

        for pipeline in pipelines:
            typer.echo(pipeline.name)

    run_or_exit(_run)


@app.command("get")
def get_command(
    ctx: typer.Context,
    application: str = typer.Argument(..., help="Application name"),
    pipeline_name: str = typer.Argument(..., help="Pipeline name"),
) -> None:
    """Print a pipeline config as JSON."""

    def _run() -> None:
        client = client_from_context(ctx)
        try:
            pipeline_config = client.pipelines.get_config(application, pipeline_name)
        except SpinnakerError as exc:
            raise exc.add_context("fetching pipeline")

        if pipeline_config is None:
            console.print(f"Pipeline {escape(application)}/{escape(pipeline_name)} not found", highlight=False)
            raise typer.Exit(1)
        console.print_json(data=pipeline_config.to_json_dict())

    run_or_exit(_run)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    application: str = typer.Argument(..., help="Application name"),
    pipeline_name: str = typer.Argument(..., help="Pipeline name"),
) -> None:
    """Delete a pipeline config."""

    def _run() -> None:
        client = client_from_context(ctx)
        try:
            client.pipelines.delete(application, pipeline_name)
        except SpinnakerError as exc:
            raise exc.add_context("deleting pipeline")
        label = escape(f"{application}/{pipeline_name}")
        console.print(f"[green]Deleted pipeline[/green] {label}", highlight=False)

    run_or_exit(_run)


__all__ = ["app"]
