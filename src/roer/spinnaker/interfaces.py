"""Capability interfaces of the Spinnaker client.

Operation drivers depend on the narrowest interface they need so each
capability can be exercised with a focused fake.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from .models import ApplicationInfo, ExecutionResponse, PipelineConfig, Task, TaskRefResponse


class TaskOperations(Protocol):
    """Read access to asynchronous task executions."""

    def get_task(self, ref: str, timeout: Optional[float] = None) -> ExecutionResponse:
        """Fetch one snapshot of the execution behind *ref*.

        Args:
            ref: Task reference returned by a submission (relative URL)
            timeout: Upper bound for this single request, in seconds

        Raises:
            TransportError: Connection, TLS or timeout failure
            UnexpectedStatusError: Status other than 200
            DecodeError: Body is not an execution
        """
        ...


class ApplicationOperations(Protocol):
    def submit_task(self, app: str, task: Task) -> TaskRefResponse: ...

    def get(self, app: str) -> Optional[bytes]: ...

    def list(self) -> list[ApplicationInfo]: ...


class PipelineOperations(Protocol):
    def get_config(self, app: str, pipeline_config_id: str) -> Optional[PipelineConfig]: ...

    def list_configs(self, app: str) -> list[PipelineConfig]: ...

    def save_config(self, pipeline_config: PipelineConfig) -> None: ...

    def delete(self, app: str, pipeline_id: str) -> None: ...


class TemplateOperations(Protocol):
    def exists(self, template_id: str) -> bool: ...

    def publish(self, template: dict[str, Any], options: Any = None) -> TaskRefResponse: ...

    def delete(self, template_id: str) -> TaskRefResponse: ...

    def plan(
        self,
        configuration: dict[str, Any],
        template: Optional[dict[str, Any]] = None,
    ) -> bytes:
        """Run a synchronous plan.

        Returns the resolved pipeline JSON on HTTP 200.

        Raises:
            InvalidPipelineTemplateError: HTTP 400, carries the raw body
            UnexpectedStatusError: Any other non-200 status, carries the raw body
        """
        ...


__all__ = [
    "ApplicationOperations",
    "PipelineOperations",
    "TaskOperations",
    "TemplateOperations",
]
