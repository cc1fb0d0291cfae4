"""CLI tests for pipeline template commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from roer import app

runner = CliRunner()

TEMPLATE_YAML = """\
schema: "1"
id: tmpl-1
metadata:
  name: Default
stages:
  - id: wait
    type: wait
    config:
      waitTime: 5
"""


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.yml"
    path.write_text(TEMPLATE_YAML, encoding="utf-8")
    return path


@pytest.fixture
def configuration_file(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text('schema: "1"\npipeline:\n  application: myapp\n  name: deploy\n', encoding="utf-8")
    return path


def test_publish_new_template(cli_gate, template_file, make_execution):
    cli_gate.add("GET", "/pipelineTemplates/tmpl-1", status=404)
    cli_gate.add("POST", "/pipelineTemplates", status=202, json_body={"ref": "/tasks/01HPUB"})
    cli_gate.add("GET", "/tasks/01HPUB", json_body=make_execution("SUCCEEDED", end_time=3))

    result = runner.invoke(app, ["pipeline-template", "publish", str(template_file)])

    assert result.exit_code == 0, result.output
    assert "Task completed" in result.output
    assert cli_gate.json_body(1)["stages"][0]["config"] == {"waitTime": 5}


def test_publish_existing_with_overrides(cli_gate, template_file):
    cli_gate.add("GET", "/pipelineTemplates/custom", status=200, json_body={})
    cli_gate.add("POST", "/pipelineTemplates/custom", status=202, json_body={"ref": "/tasks/01HPUB"})

    result = runner.invoke(
        app,
        [
            "pipeline-template",
            "publish",
            str(template_file),
            "--template-id",
            "custom",
            "--skip-plan",
            "--no-monitor",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Task submitted: /tasks/01HPUB" in result.output
    request = cli_gate.requests[-1]
    assert request.url.params["skipPlanDependents"] == "true"
    assert json.loads(request.content)["id"] == "custom"


def test_publish_update_flag_is_deprecated(cli_gate, template_file):
    cli_gate.add("GET", "/pipelineTemplates/tmpl-1", status=200, json_body={})
    cli_gate.add("POST", "/pipelineTemplates/tmpl-1", status=202, json_body={"ref": "/tasks/01HPUB"})

    result = runner.invoke(app, ["pipeline-template", "publish", str(template_file), "--update", "--no-monitor"])

    assert result.exit_code == 0, result.output
    assert "deprecated" in result.output


def test_publish_task_failure(cli_gate, template_file, make_execution):
    cli_gate.add("GET", "/pipelineTemplates/tmpl-1", status=404)
    cli_gate.add("POST", "/pipelineTemplates", status=202, json_body={"ref": "/tasks/01HPUB"})
    cli_gate.add("GET", "/tasks/01HPUB", json_body=make_execution("TERMINAL", end_time=3))

    result = runner.invoke(app, ["pipeline-template", "publish", str(template_file)])

    assert result.exit_code == 1
    assert "publishing template" in result.output
    assert '"status": "TERMINAL"' in result.output


def test_plan_prints_pipeline(cli_gate, configuration_file):
    cli_gate.add("POST", "/pipelines/start", json_body={"name": "deploy", "stages": [{"type": "wait"}]})

    result = runner.invoke(app, ["pipeline-template", "plan", str(configuration_file)])

    assert result.exit_code == 0, result.output
    assert '"type": "wait"' in result.output
    assert cli_gate.json_body()["plan"] is True
    assert "template" not in cli_gate.json_body()


def test_plan_with_local_template(cli_gate, configuration_file, template_file):
    cli_gate.add("POST", "/pipelines/start", json_body={})

    result = runner.invoke(
        app, ["pipeline-template", "plan", str(configuration_file), "--template", str(template_file)]
    )

    assert result.exit_code == 0, result.output
    assert cli_gate.json_body()["template"]["id"] == "tmpl-1"


def test_plan_validation_errors(cli_gate, configuration_file):
    cli_gate.add(
        "POST",
        "/pipelines/start",
        status=400,
        json_body={
            "message": "Pipeline template is invalid",
            "errors": [{"severity": "FATAL", "message": "Missing variable region"}],
        },
    )

    result = runner.invoke(app, ["pipeline-template", "plan", str(configuration_file)])

    assert result.exit_code == 1
    assert "Missing variable region" in result.output


def test_plan_unstructured_bad_request(cli_gate, configuration_file):
    cli_gate.add("POST", "/pipelines/start", status=400, content=b"upstream exploded")

    result = runner.invoke(app, ["pipeline-template", "plan", str(configuration_file)])

    assert result.exit_code == 1
    assert "upstream exploded" in result.output


def test_delete(cli_gate, make_execution):
    cli_gate.add("DELETE", "/pipelineTemplates/tmpl-1", status=202, json_body={"ref": "/tasks/01HDEL"})
    cli_gate.add("GET", "/tasks/01HDEL", json_body=make_execution("SUCCEEDED", end_time=3))

    result = runner.invoke(app, ["pipeline-template", "delete", "tmpl-1"])

    assert result.exit_code == 0, result.output
    assert cli_gate.paths() == [("DELETE", "/pipelineTemplates/tmpl-1"), ("GET", "/tasks/01HDEL")]
