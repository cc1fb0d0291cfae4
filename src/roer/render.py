"""Terminal rendering of API payloads and failures."""

from __future__ import annotations

import json
import logging
from typing import Union

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from roer.spinnaker.interpreter import TaskOutcome
from roer.spinnaker.models import TemplatedPipelineError, TemplatedPipelineErrorResponse

logger = logging.getLogger(__name__)


def pretty_print_json(payload: Union[bytes, str], console: Console) -> None:
    """Print *payload* as indented JSON, or verbatim when it is not JSON."""
    text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
    try:
        json.loads(text)
    except ValueError as exc:
        logger.warning("failed prettyifying response: %s", exc)
        console.print(text, markup=False, highlight=False, soft_wrap=True)
        return
    console.print_json(text)


def _add_plan_error(parent: Tree, error: TemplatedPipelineError) -> None:
    severity = error.severity or "ERROR"
    label = f"[red]{escape(severity)}[/red] {escape(error.message)}"
    if error.location:
        label += f" [dim]({escape(error.location)})[/dim]"
    node = parent.add(label)
    if error.cause:
        node.add(f"cause: {escape(error.cause)}")
    if error.suggestion:
        node.add(f"[yellow]suggestion:[/yellow] {escape(error.suggestion)}")
    for key, value in sorted(error.detail.items()):
        node.add(f"[dim]{escape(key)}:[/dim] {escape(value)}")
    for nested in error.nested_errors:
        _add_plan_error(node, nested)


def render_plan_errors(error_response: TemplatedPipelineErrorResponse, console: Console) -> None:
    """Render plan validation errors as a tree."""
    title = error_response.message or "Pipeline template is invalid"
    tree = Tree(f"[bold red]{escape(title)}[/bold red]", guide_style="grey50")
    for error in error_response.errors:
        _add_plan_error(tree, error)
    console.print(tree)


def render_task_failure(outcome: TaskOutcome, console: Console) -> None:
    """Print the structured error of a failed task, or the raw execution."""
    if outcome.retrofit_error is not None:
        retrofit_error = outcome.retrofit_error
        if retrofit_error.response_body:
            pretty_print_json(retrofit_error.response_body, console)
        else:
            console.print_json(retrofit_error.model_dump_json(by_alias=True))
        return

    if outcome.decode_error is not None:
        console.print(f"[yellow]{escape(outcome.decode_error)}[/yellow]", highlight=False)
    console.print_json(outcome.execution.model_dump_json(by_alias=True))


__all__ = ["pretty_print_json", "render_plan_errors", "render_task_failure"]
