"""Manage ~/.roer/config.toml."""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table

from roer.cli.helpers import console, get_state, run_or_exit
from roer.config import SETTINGS

app = typer.Typer(help="Show or change the user configuration")


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Show the stored settings."""

    def _run() -> None:
        user_config = get_state(ctx).user_config
        values = user_config.load()
        table = Table(title=str(user_config.config_file), show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key in SETTINGS:
            if key in values:
                table.add_row(key, str(values[key]))
        console.print(table)

    run_or_exit(_run)


@app.command("set")
def set_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"Setting name ({', '.join(SETTINGS)})"),
    value: str = typer.Argument(..., help="Setting value"),
) -> None:
    """Store a setting."""

    def _run() -> None:
        converted = get_state(ctx).user_config.set(key, value)
        console.print(f"[green]Set[/green] {escape(key)} = {escape(str(converted))}", highlight=False)

    run_or_exit(_run)


__all__ = ["app"]
