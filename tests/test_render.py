"""Tests for terminal rendering."""

from __future__ import annotations

import io
import logging

import pytest
from rich.console import Console

from roer.render import pretty_print_json, render_plan_errors, render_task_failure
from roer.spinnaker.interpreter import interpret_execution
from roer.spinnaker.models import ExecutionResponse, TemplatedPipelineErrorResponse


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def output(console: Console) -> str:
    return console.file.getvalue()


def test_pretty_print_json_indents(console):
    pretty_print_json(b'{"name":"deploy","stages":[]}', console)

    assert '"name": "deploy"' in output(console)
    assert output(console).startswith("{\n")


def test_pretty_print_non_json_falls_back_to_raw(console, caplog):
    with caplog.at_level(logging.WARNING, logger="roer"):
        pretty_print_json("<html>[bold]Bad Gateway[/bold]</html>", console)

    assert "<html>[bold]Bad Gateway[/bold]</html>" in output(console)
    assert "failed prettyifying response" in caplog.text


def test_render_plan_errors_tree(console):
    error_response = TemplatedPipelineErrorResponse.model_validate(
        {
            "message": "Pipeline template is invalid",
            "errors": [
                {
                    "severity": "FATAL",
                    "message": "Stage [wait] has no type",
                    "location": "template:stages.wait",
                    "suggestion": "Add a type",
                    "detail": {"stage": "wait"},
                    "nestedErrors": [{"message": "nested problem"}],
                }
            ],
        }
    )

    render_plan_errors(error_response, console)

    text = output(console)
    assert "Pipeline template is invalid" in text
    assert "FATAL Stage [wait] has no type" in text
    assert "(template:stages.wait)" in text
    assert "suggestion: Add a type" in text
    assert "stage: wait" in text
    assert "ERROR nested problem" in text


def test_render_task_failure_prints_response_body(console, make_execution):
    payload = make_execution(
        "TERMINAL",
        end_time=1,
        variables=[{"key": "exception", "value": {"details": {"responseBody": '{"message":"exists"}'}}}],
    )

    render_task_failure(interpret_execution(ExecutionResponse.model_validate(payload)), console)

    assert '"message": "exists"' in output(console)


def test_render_task_failure_without_body_prints_error(console, make_execution):
    payload = make_execution(
        "TERMINAL",
        end_time=1,
        variables=[{"key": "exception", "value": {"details": {"error": "Conflict", "status": 409}}}],
    )

    render_task_failure(interpret_execution(ExecutionResponse.model_validate(payload)), console)

    assert '"error": "Conflict"' in output(console)
    assert '"status": 409' in output(console)


def test_render_task_failure_undecodable_prints_execution(console, make_execution):
    payload = make_execution("TERMINAL", end_time=1, variables=[{"key": "exception", "value": "boom"}])

    render_task_failure(interpret_execution(ExecutionResponse.model_validate(payload)), console)

    text = output(console)
    assert "could not decode exception variable" in text
    assert '"status": "TERMINAL"' in text
