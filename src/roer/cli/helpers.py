"""Shared state and error reporting for CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from roer.config import RoerConfig, resolve_client_config
from roer.files import DocumentError
from roer.operations import DEFAULT_TASK_TIMEOUT, TaskRunner, TaskSubmission
from roer.render import pretty_print_json, render_plan_errors, render_task_failure
from roer.spinnaker.client import SpinnakerClient
from roer.spinnaker.config import ClientConfig
from roer.spinnaker.errors import (
    InvalidPipelineTemplateError,
    SpinnakerError,
    TaskFailedError,
    UnexpectedStatusError,
)

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")

TIMEOUT_OPTION_HELP = "Seconds to wait for the task to complete"
MONITOR_OPTION_HELP = "Wait for the task to complete (--no-monitor prints the task ref and exits)"


def create_client(config: ClientConfig) -> SpinnakerClient:
    """Build the API client for an invocation."""
    return SpinnakerClient.from_config(config)


@dataclass
class CLIState:
    """Per-invocation state stored on ``typer.Context.obj``."""

    overrides: dict[str, Any] = field(default_factory=dict)
    user_config: RoerConfig = field(default_factory=RoerConfig)
    _client: Optional[SpinnakerClient] = None

    def client_config(self) -> ClientConfig:
        return resolve_client_config(self.overrides, self.user_config)

    def client(self) -> SpinnakerClient:
        if self._client is None:
            config = self.client_config()
            client = create_client(config)
            if config.has_fiat_credentials:
                logger.debug("Logging in to fiat as %s", config.fiat_user)
                client.session.fiat_login(config.fiat_user or "", config.fiat_pass or "")
            self._client = client
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def get_state(ctx: typer.Context) -> CLIState:
    root = ctx.find_root()
    if not isinstance(root.obj, CLIState):
        root.obj = CLIState()
        root.call_on_close(root.obj.close)
    return root.obj


def client_from_context(ctx: typer.Context) -> SpinnakerClient:
    try:
        return get_state(ctx).client()
    except SpinnakerError as exc:
        raise exc.add_context("creating spinnaker client")


def task_runner(client: SpinnakerClient, timeout: float = DEFAULT_TASK_TIMEOUT, monitor: bool = True) -> TaskRunner:
    return TaskRunner(client.tasks, timeout=timeout, monitor=monitor)


def run_task(fn: Callable[[], TaskSubmission]) -> TaskSubmission:
    """Run a task driver with a spinner and report how it ended."""
    with console.status("Waiting for task to complete..."):
        submission = fn()
    if submission.outcome is None:
        console.print(f"Task submitted: {escape(submission.ref)}", highlight=False)
    else:
        console.print(f"[green]Task completed[/green] ({escape(submission.outcome.status)})")
    return submission


def run_or_exit(fn: Callable[[], T]) -> T:
    """Call *fn*, turning client errors into a message and exit code 1."""
    try:
        return fn()
    except TaskFailedError as exc:
        err_console.print(f"[red]Task failed:[/red] {escape(str(exc))}", highlight=False)
        render_task_failure(exc.outcome, console)
        raise typer.Exit(1) from exc
    except InvalidPipelineTemplateError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        if exc.error_response is not None:
            render_plan_errors(exc.error_response, console)
        else:
            pretty_print_json(exc.body, console)
        raise typer.Exit(1) from exc
    except UnexpectedStatusError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        if exc.body:
            pretty_print_json(exc.body, console)
        raise typer.Exit(1) from exc
    except (SpinnakerError, DocumentError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(1) from exc


__all__ = [
    "CLIState",
    "MONITOR_OPTION_HELP",
    "TIMEOUT_OPTION_HELP",
    "client_from_context",
    "console",
    "create_client",
    "err_console",
    "get_state",
    "run_or_exit",
    "run_task",
    "task_runner",
]
