"""Operation drivers.

Each asynchronous driver builds a request body, submits it, and hands the
returned task reference to the poller. The terminal execution then goes to
the result interpreter. A terminal failure is raised as ``TaskFailedError``
carrying the interpreted outcome.

Plan is synchronous and returns the resolved pipeline JSON directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import ValidationError

from roer.pipeline_config import PipelineConfiguration
from roer.spinnaker.client import PublishTemplateOptions
from roer.spinnaker.errors import DecodeError, SpinnakerError, TaskFailedError
from roer.spinnaker.interfaces import (
    ApplicationOperations,
    PipelineOperations,
    TaskOperations,
    TemplateOperations,
)
from roer.spinnaker.interpreter import TaskOutcome, interpret_execution
from roer.spinnaker.models import (
    ApplicationAttributes,
    ApplicationJob,
    PipelineConfig,
    Task,
    TaskRefResponse,
)
from roer.spinnaker.poller import TaskPoller

logger = logging.getLogger(__name__)

DEFAULT_TASK_TIMEOUT = 60.0


@dataclass(frozen=True)
class TaskSubmission:
    """A submitted task and, when it was monitored, its outcome."""

    ref: str
    outcome: Optional[TaskOutcome] = None

    @property
    def monitored(self) -> bool:
        return self.outcome is not None


class TaskRunner:
    """Submit a task, poll it to completion and interpret the result."""

    def __init__(
        self,
        tasks: TaskOperations,
        timeout: float = DEFAULT_TASK_TIMEOUT,
        monitor: bool = True,
        poller: Optional[TaskPoller] = None,
    ):
        if timeout <= 0:
            raise ValueError("task timeout must be greater than zero")
        self.tasks = tasks
        self.timeout = timeout
        self.monitor = monitor
        self.poller = poller or TaskPoller(tasks)

    def run(self, submit: Callable[[], TaskRefResponse], context: str) -> TaskSubmission:
        try:
            ref = submit()
        except SpinnakerError as exc:
            raise exc.add_context(context)

        if not self.monitor:
            logger.info("Task submitted (ref=%s)", ref.ref)
            return TaskSubmission(ref=ref.ref)

        outcome = self.wait(ref.ref, context)
        return TaskSubmission(ref=ref.ref, outcome=outcome)

    def wait(self, ref: str, context: str = "waiting for task") -> TaskOutcome:
        """Poll *ref* and interpret the terminal execution."""
        try:
            execution = self.poller.poll(ref, self.timeout)
        except SpinnakerError as exc:
            raise exc.add_context(context)

        outcome = interpret_execution(execution)
        if outcome.failed:
            logger.error("Task failed (status=%s)", outcome.status)
            raise TaskFailedError(outcome).add_context(context)

        logger.info("Task completed (status=%s)", outcome.status)
        return outcome


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


def create_application(
    applications: ApplicationOperations,
    runner: TaskRunner,
    name: str,
    owner_email: str,
) -> TaskSubmission:
    logger.debug("Filling in create application task for %s", name)
    task = Task(
        application=name,
        description=f"Create Application: {name}",
        job=[
            ApplicationJob(
                type="createApplication",
                application=ApplicationAttributes(name=name, email=owner_email),
            )
        ],
    )
    logger.info("Sending create app task")
    return runner.run(lambda: applications.submit_task(name, task), "creating application")


def delete_application(
    applications: ApplicationOperations,
    runner: TaskRunner,
    name: str,
) -> TaskSubmission:
    task = Task(
        application=name,
        description=f"Delete Application: {name}",
        job=[
            ApplicationJob(
                type="deleteApplication",
                application=ApplicationAttributes(name=name),
            )
        ],
    )
    logger.info("Sending delete app task")
    return runner.run(lambda: applications.submit_task(name, task), "deleting application")


# ---------------------------------------------------------------------------
# Pipeline templates
# ---------------------------------------------------------------------------


def publish_template(
    templates: TemplateOperations,
    runner: TaskRunner,
    template: dict[str, Any],
    options: Optional[PublishTemplateOptions] = None,
) -> TaskSubmission:
    logger.info("Publishing template")
    return runner.run(lambda: templates.publish(template, options), "publishing template")


def delete_template(
    templates: TemplateOperations,
    runner: TaskRunner,
    template_id: str,
) -> TaskSubmission:
    logger.info("Deleting template %s", template_id)
    return runner.run(lambda: templates.delete(template_id), "deleting pipeline template")


def plan_template(
    templates: TemplateOperations,
    configuration: dict[str, Any],
    template: Optional[dict[str, Any]] = None,
) -> bytes:
    """Plan *configuration*, optionally against an inlined *template*.

    Raises ``InvalidPipelineTemplateError`` (with the raw body) when the
    server rejects the configuration, ``UnexpectedStatusError`` otherwise.
    """
    try:
        return templates.plan(configuration, template)
    except SpinnakerError as exc:
        raise exc.add_context("planning configuration")


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------


def save_pipeline(pipelines: PipelineOperations, document: dict[str, Any]) -> PipelineConfig:
    """Save a templated pipeline configuration document."""
    if "schema" not in document:
        logger.error("Pipeline save command currently only supports pipeline template configurations")

    configuration = PipelineConfiguration.from_document(document)
    payload = configuration.to_client()
    return _save_with_existing_id(pipelines, payload)


def save_pipeline_json(pipelines: PipelineOperations, document: dict[str, Any]) -> PipelineConfig:
    """Save a raw pipeline config document."""
    try:
        payload = PipelineConfig.model_validate(document)
    except ValidationError as exc:
        raise DecodeError(f"unmarshaling JSON pipeline: {exc}") from exc
    return _save_with_existing_id(pipelines, payload)


def _save_with_existing_id(pipelines: PipelineOperations, payload: PipelineConfig) -> PipelineConfig:
    try:
        existing = pipelines.get_config(payload.application, payload.name)
    except SpinnakerError as exc:
        raise exc.add_context("searching for existing pipeline config")

    if existing is not None and existing.id:
        payload = payload.model_copy(update={"id": existing.id})

    try:
        pipelines.save_config(payload)
    except SpinnakerError as exc:
        raise exc.add_context("saving pipeline config")
    return payload


__all__ = [
    "DEFAULT_TASK_TIMEOUT",
    "TaskRunner",
    "TaskSubmission",
    "create_application",
    "delete_application",
    "delete_template",
    "plan_template",
    "publish_template",
    "save_pipeline",
    "save_pipeline_json",
]
