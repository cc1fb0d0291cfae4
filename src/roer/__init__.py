"""
roer - a thin Spinnaker CLI.

Usage:
    roer app create myapp owner@example.com
    roer pipeline-template publish template.yml
    roer pipeline-template plan pipeline.yml
    roer pipeline save pipeline.yml
"""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import typer

from roer.cli.commands import app as app_commands
from roer.cli.commands import config_cmd, pipeline, pipeline_template, task
from roer.cli.helpers import CLIState, console
from roer.logging_config import configure_logging


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        current = version("roer")
    except PackageNotFoundError:
        current = "unknown"
    console.print(f"roer {current}", highlight=False)
    raise typer.Exit()


app = typer.Typer(
    name="roer",
    help="Spinnaker CLI for applications, pipelines and pipeline templates",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    silent: bool = typer.Option(False, "--silent", "-s", help="Only log errors"),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", envvar="SPINNAKER_API", help="Spinnaker gate base URL"
    ),
    cert_path: Optional[Path] = typer.Option(
        None, "--cert-path", "-c", envvar="SPINNAKER_CLIENT_CERT", help="Client certificate (PEM)"
    ),
    key_path: Optional[Path] = typer.Option(
        None, "--key-path", "-k", envvar="SPINNAKER_CLIENT_KEY", help="Client certificate key (PEM)"
    ),
    api_session: Optional[str] = typer.Option(
        None, "--api-session", envvar="SPINNAKER_API_SESSION", help="Gate SESSION cookie value"
    ),
    iap_token: Optional[str] = typer.Option(
        None, "--iap-token", envvar="SPINNAKER_IAP_TOKEN", help="Bearer token sent on every request"
    ),
    fiat_user: Optional[str] = typer.Option(None, "--fiat-user", help="Fiat username for form login"),
    fiat_pass: Optional[str] = typer.Option(None, "--fiat-pass", help="Fiat password for form login"),
    client_timeout: Optional[float] = typer.Option(
        None, "--client-timeout", help="Per-request HTTP timeout in seconds"
    ),
    insecure: bool = typer.Option(False, "--insecure", help="Skip TLS certificate verification"),
    show_version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """Configure logging and connection settings for the invoked command."""
    configure_logging(verbose=verbose, silent=silent)
    state = CLIState(
        overrides={
            "api": endpoint,
            "cert_path": cert_path,
            "key_path": key_path,
            "api_session": api_session,
            "iap_token": iap_token,
            "fiat_user": fiat_user,
            "fiat_pass": fiat_pass,
            "client_timeout": client_timeout,
            "insecure": insecure or None,
        }
    )
    ctx.obj = state
    ctx.call_on_close(state.close)


app.add_typer(app_commands.app, name="app")
app.add_typer(pipeline.app, name="pipeline")
app.add_typer(pipeline_template.app, name="pipeline-template")
app.add_typer(task.app, name="task")
app.add_typer(config_cmd.app, name="config")


def main():
    app()


if __name__ == "__main__":
    main()
