"""Wire models for the Spinnaker gate API.

Responses are mostly loosely typed JSON; only the shapes the client reasons
about are modelled here. Unknown fields are ignored and ``null`` values fall
back to the field default, so a sparse server payload still validates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

TERMINAL_STATUS = "TERMINAL"
EXCEPTION_VARIABLE = "exception"


class SpinnakerModel(BaseModel):
    """Base model: camelCase aliases, unknown keys ignored, nulls dropped."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize for a request body (aliases, ``None`` omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Tasks and executions
# ---------------------------------------------------------------------------


class TaskRefResponse(SpinnakerModel):
    """Task ID URL returned when an orchestration is accepted."""

    ref: str = Field(..., min_length=1)


class ExecutionStep(SpinnakerModel):
    """Partial view of a single execution step."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    start_time: int = Field(0, alias="startTime")
    end_time: int = Field(0, alias="endTime")
    status: str = ""


class ExecutionVariable(SpinnakerModel):
    """Key/value pair attached to an execution."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: Any = None


class RetrofitErrorResponse(SpinnakerModel):
    """Error raised by a downstream HTTP call inside a failed task."""

    error: str = ""
    errors: list[str] = Field(default_factory=list)
    kind: str = ""
    response_body: str = Field("", alias="responseBody")
    status: int = 0
    url: str = ""


class _ExceptionVariable(SpinnakerModel):
    details: RetrofitErrorResponse = Field(default_factory=RetrofitErrorResponse)


@dataclass(frozen=True)
class RetrofitErrorExtraction:
    """Result of decoding an ``exception`` variable.

    Exactly one of ``error`` and ``decode_error`` is set.
    """

    error: Optional[RetrofitErrorResponse] = None
    decode_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is not None


class ExecutionResponse(SpinnakerModel):
    """Snapshot of an orchestration execution at poll time."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    application: str = ""
    status: str = ""
    build_time: int = Field(0, alias="buildTime")
    start_time: int = Field(0, alias="startTime")
    end_time: int = Field(0, alias="endTime")
    execution: Any = None
    steps: list[ExecutionStep] = Field(default_factory=list)
    variables: list[ExecutionVariable] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """An end time is the completion signal, not the status string."""
        return self.end_time > 0

    @property
    def is_terminal_failure(self) -> bool:
        return self.status == TERMINAL_STATUS

    def extract_retrofit_error(self) -> Optional[RetrofitErrorExtraction]:
        """Decode the first ``exception`` variable, if any.

        Returns ``None`` when the execution carries no exception variable. A
        payload that does not match ``RetrofitErrorResponse`` yields an
        extraction holding ``decode_error`` instead of raising.
        """
        for variable in self.variables:
            if variable.key != EXCEPTION_VARIABLE:
                continue
            try:
                exception = _ExceptionVariable.model_validate(variable.value)
            except ValidationError as exc:
                return RetrofitErrorExtraction(
                    decode_error=f"could not decode exception variable: {exc}"
                )
            return RetrofitErrorExtraction(error=exception.details)
        return None


# ---------------------------------------------------------------------------
# Task submission bodies
# ---------------------------------------------------------------------------


class ApplicationAttributes(SpinnakerModel):
    name: str
    email: Optional[str] = None


class ApplicationJob(SpinnakerModel):
    """Single job of an application task; ``type`` is the discriminator."""

    type: str
    application: ApplicationAttributes


class Task(SpinnakerModel):
    application: str
    description: str
    job: list[ApplicationJob] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        payload = super().to_json_dict()
        if not payload.get("job"):
            payload.pop("job", None)
        return payload


# ---------------------------------------------------------------------------
# Templated pipelines
# ---------------------------------------------------------------------------


class TemplatedPipelineRequest(SpinnakerModel):
    type: str = "templatedPipeline"
    config: Any = None
    template: Optional[dict[str, Any]] = None
    plan: bool = False

    def to_json_dict(self) -> dict[str, Any]:
        payload = super().to_json_dict()
        payload.setdefault("config", None)
        return payload


class TemplatedPipelineError(SpinnakerModel):
    """Single validation error, possibly with nested errors."""

    location: str = ""
    message: str = ""
    suggestion: str = ""
    cause: str = ""
    severity: str = ""
    detail: dict[str, str] = Field(default_factory=dict)
    nested_errors: list[TemplatedPipelineError] = Field(default_factory=list, alias="nestedErrors")


class TemplatedPipelineErrorResponse(SpinnakerModel):
    """Returned by plan when a pipeline template is invalid."""

    errors: list[TemplatedPipelineError] = Field(default_factory=list)
    message: str = ""
    status: str = ""


# ---------------------------------------------------------------------------
# Pipeline configs and applications
# ---------------------------------------------------------------------------


class PipelineConfig(SpinnakerModel):
    """Saved pipeline config. Keys without a field are kept as extras."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    type: Optional[str] = None
    name: str = ""
    application: str = ""
    description: Optional[str] = None
    execution_engine: Optional[str] = Field(None, alias="executionEngine")
    parallel: bool = False
    limit_concurrent: bool = Field(False, alias="limitConcurrent")
    keep_waiting_pipelines: bool = Field(False, alias="keepWaitingPipelines")
    stages: Optional[list[dict[str, Any]]] = None
    triggers: Optional[list[dict[str, Any]]] = None
    parameters: Optional[list[dict[str, Any]]] = Field(None, alias="parameterConfig")
    notifications: Optional[list[dict[str, Any]]] = None
    last_modified_by: str = Field("", alias="lastModifiedBy")
    config: Any = None
    update_ts: str = Field("", alias="updateTs")


class ApplicationInfo(SpinnakerModel):
    name: str = ""


__all__ = [
    "EXCEPTION_VARIABLE",
    "TERMINAL_STATUS",
    "ApplicationAttributes",
    "ApplicationInfo",
    "ApplicationJob",
    "ExecutionResponse",
    "ExecutionStep",
    "ExecutionVariable",
    "PipelineConfig",
    "RetrofitErrorExtraction",
    "RetrofitErrorResponse",
    "SpinnakerModel",
    "Task",
    "TaskRefResponse",
    "TemplatedPipelineError",
    "TemplatedPipelineErrorResponse",
    "TemplatedPipelineRequest",
]
