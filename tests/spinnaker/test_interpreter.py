"""Tests for interpret_execution."""

from __future__ import annotations

import logging

import pytest

from roer.spinnaker.interpreter import interpret_execution
from roer.spinnaker.models import ExecutionResponse, RetrofitErrorResponse

RETROFIT_DETAILS = {
    "error": "Bad Request",
    "errors": ["application name is required"],
    "kind": "HTTP",
    "responseBody": '{"message": "application name is required"}',
    "status": 400,
    "url": "https://front50.example.com/v2/applications",
}


def test_succeeded_execution_is_not_a_failure(make_execution):
    execution = ExecutionResponse.model_validate(make_execution("SUCCEEDED", end_time=5))

    outcome = interpret_execution(execution)

    assert outcome.succeeded
    assert outcome.status == "SUCCEEDED"
    assert outcome.retrofit_error is None


@pytest.mark.parametrize("status", ["CANCELED", "STOPPED", "FAILED_CONTINUE"])
def test_only_terminal_status_counts_as_failure(make_execution, status):
    execution = ExecutionResponse.model_validate(make_execution(status, end_time=5))

    assert interpret_execution(execution).failed is False


def test_terminal_with_exception_variable_decodes_retrofit_error(make_execution):
    payload = make_execution(
        "TERMINAL",
        end_time=5,
        variables=[
            {"key": "application", "value": "myapp"},
            {"key": "exception", "value": {"details": RETROFIT_DETAILS}},
        ],
    )

    outcome = interpret_execution(ExecutionResponse.model_validate(payload))

    assert outcome.failed
    assert outcome.decode_error is None
    assert outcome.retrofit_error == RetrofitErrorResponse(
        error="Bad Request",
        errors=["application name is required"],
        kind="HTTP",
        response_body='{"message": "application name is required"}',
        status=400,
        url="https://front50.example.com/v2/applications",
    )


def test_terminal_without_exception_variable(make_execution):
    payload = make_execution("TERMINAL", end_time=5, variables=[{"key": "application", "value": "myapp"}])

    outcome = interpret_execution(ExecutionResponse.model_validate(payload))

    assert outcome.failed
    assert outcome.retrofit_error is None
    assert outcome.decode_error is None


def test_first_exception_variable_wins(make_execution):
    payload = make_execution(
        "TERMINAL",
        end_time=5,
        variables=[
            {"key": "exception", "value": {"details": {"error": "first"}}},
            {"key": "exception", "value": {"details": {"error": "second"}}},
        ],
    )

    outcome = interpret_execution(ExecutionResponse.model_validate(payload))

    assert outcome.retrofit_error is not None
    assert outcome.retrofit_error.error == "first"


def test_exception_without_details_yields_empty_error(make_execution):
    payload = make_execution("TERMINAL", end_time=5, variables=[{"key": "exception", "value": {}}])

    outcome = interpret_execution(ExecutionResponse.model_validate(payload))

    assert outcome.retrofit_error == RetrofitErrorResponse()


@pytest.mark.parametrize(
    "value",
    [
        "java.lang.RuntimeException: boom",
        {"details": {"status": "not-a-number"}},
        {"details": {"errors": "not-a-list"}},
    ],
)
def test_undecodable_exception_is_reported_not_raised(make_execution, caplog, value):
    payload = make_execution("TERMINAL", end_time=5, variables=[{"key": "exception", "value": value}])

    with caplog.at_level(logging.WARNING, logger="roer"):
        outcome = interpret_execution(ExecutionResponse.model_validate(payload))

    assert outcome.failed
    assert outcome.retrofit_error is None
    assert outcome.decode_error is not None
    assert "could not decode exception variable" in outcome.decode_error
    assert "undecodable exception" in caplog.text
