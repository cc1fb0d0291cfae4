"""Spinnaker gate API client, split by capability.

``SpinnakerClient`` composes one API object per capability (applications,
pipelines, templates, tasks, session) over a shared ``HTTPTransport``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import ClientConfig
from .errors import (
    DecodeError,
    InvalidPipelineTemplateError,
    SpinnakerError,
    TransportError,
    UnexpectedStatusError,
)
from .http import HTTPResponse, HTTPTransport
from .models import (
    ApplicationInfo,
    ExecutionResponse,
    PipelineConfig,
    Task,
    TaskRefResponse,
    TemplatedPipelineErrorResponse,
    TemplatedPipelineRequest,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _segment(value: str) -> str:
    return quote(value, safe="")


class _BaseAPI:
    def __init__(self, transport: HTTPTransport):
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return self.transport.config.base_url

    def _url(self, path: str) -> str:
        return f"{self.endpoint}{path}"

    @staticmethod
    def _log_response(response: HTTPResponse) -> None:
        logger.debug("Response status=%s body=%s", response.status_code, response.text)

    @staticmethod
    def _decode(model: type[ModelT], response: HTTPResponse, what: str) -> ModelT:
        try:
            return model.model_validate_json(response.body)
        except ValidationError as exc:
            raise DecodeError(f"unmarshaling {what}: {exc}", response.body) from exc

    @staticmethod
    def _decode_list(model: type[ModelT], response: HTTPResponse, what: str) -> list[ModelT]:
        try:
            return TypeAdapter(list[model]).validate_json(response.body)  # type: ignore[valid-type]
        except ValidationError as exc:
            raise DecodeError(f"unmarshaling {what}: {exc}", response.body) from exc


class TaskAPI(_BaseAPI):
    """Task status reads."""

    def _task_url(self, ref: str) -> str:
        if ref.startswith(("http://", "https://")):
            return ref
        return self._url(ref if ref.startswith("/") else f"/{ref}")

    def get_task(self, ref: str, timeout: Optional[float] = None) -> ExecutionResponse:
        # a caller-supplied bound may only tighten the configured client timeout
        if timeout is not None:
            timeout = min(timeout, self.transport.config.client_timeout)
        try:
            response = self.transport.get(self._task_url(ref), timeout=timeout)
        except TransportError as exc:
            raise exc.add_context("getting task status")
        self._log_response(response)

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("get task status failed", response.status_code, response.body)
        return self._decode(ExecutionResponse, response, "task status response")

class ApplicationAPI(_BaseAPI):
    """Application reads and application task submission."""

    def submit_task(self, app: str, task: Task) -> TaskRefResponse:
        url = self._url(f"/applications/{_segment(app)}/tasks")
        try:
            response = self.transport.post_json(url, task.to_json_dict())
        except TransportError as exc:
            raise exc.add_context("submitting application task")
        self._log_response(response)

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("submit task failed", response.status_code, response.body)
        return self._decode(TaskRefResponse, response, "task create response")

    def get(self, app: str) -> Optional[bytes]:
        """Return the raw application JSON, or ``None`` if missing or forbidden."""
        try:
            response = self.transport.get(self._url(f"/applications/{_segment(app)}"))
        except TransportError as exc:
            raise exc.add_context("unable to get application info")
        self._log_response(response)

        if response.status_code in (httpx.codes.NOT_FOUND, httpx.codes.FORBIDDEN):
            return None
        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(
                f"Unable to determine state of application {app}",
                response.status_code,
                response.body,
            )
        return response.body

    def list(self) -> list[ApplicationInfo]:
        try:
            response = self.transport.get(self._url("/applications"))
        except TransportError as exc:
            raise exc.add_context("unable to get application list")
        self._log_response(response)

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("Unable to fetch application list", response.status_code, response.body)
        return self._decode_list(ApplicationInfo, response, "application list")


class PipelineAPI(_BaseAPI):
    """Pipeline config CRUD."""

    def _configs_url(self, app: str) -> str:
        return self._url(f"/applications/{_segment(app)}/pipelineConfigs")

    def get_config(self, app: str, pipeline_config_id: str) -> Optional[PipelineConfig]:
        url = f"{self._configs_url(app)}/{_segment(pipeline_config_id)}"
        logger.debug("getting url %s", url)
        try:
            response = self.transport.get(url)
        except TransportError as exc:
            raise exc.add_context("getting pipeline config")
        self._log_response(response)

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("get pipeline config failed", response.status_code, response.body)
        # gate answers 200 with an empty body for unknown configs
        if not response.body.strip():
            return None
        return self._decode(PipelineConfig, response, "pipeline config response")

    def list_configs(self, app: str) -> list[PipelineConfig]:
        try:
            response = self.transport.get(self._configs_url(app))
        except TransportError as exc:
            raise exc.add_context("unable to get pipeline list")
        self._log_response(response)

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("Unable to fetch pipeline list", response.status_code, response.body)
        return self._decode_list(PipelineConfig, response, "pipeline list")

    def save_config(self, pipeline_config: PipelineConfig) -> None:
        url = self._url("/pipelines")
        logger.debug("saving pipeline %s", pipeline_config.name)
        try:
            response = self.transport.post_json(url, pipeline_config.to_json_dict())
        except TransportError as exc:
            raise exc.add_context("save pipeline config")
        self._log_response(response)

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("save pipeline request failed", response.status_code, response.body)

    def delete(self, app: str, pipeline_id: str) -> None:
        url = self._url(f"/pipelines/{_segment(app)}/{_segment(pipeline_id)}")
        logger.debug("deleting pipeline %s", pipeline_id)
        try:
            response = self.transport.delete(url)
        except TransportError as exc:
            raise exc.add_context("delete pipeline config")
        self._log_response(response)

        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError("delete request failed", response.status_code, response.body)


@dataclass(frozen=True)
class PublishTemplateOptions:
    """Options for publishing templates."""

    skip_plan: bool = False
    template_id: Optional[str] = None
    source: Optional[str] = None


class TemplateAPI(_BaseAPI):
    """Pipeline template publish, delete and plan."""

    def _templates_url(self) -> str:
        return self._url("/pipelineTemplates")

    def exists(self, template_id: str) -> bool:
        try:
            response = self.transport.get(f"{self._templates_url()}/{_segment(template_id)}")
        except TransportError as exc:
            raise exc.add_context("checking pipeline template")
        logger.debug("Response status=%s", response.status_code)

        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        if response.status_code == httpx.codes.OK:
            return True
        raise UnexpectedStatusError(
            f"Unable to determine state of the pipeline template {template_id}",
            response.status_code,
            response.body,
        )

    def publish(
        self,
        template: dict[str, Any],
        options: Optional[PublishTemplateOptions] = None,
    ) -> TaskRefResponse:
        """Create or update *template*; returns the publish task reference.

        The existence check and the following POST are not atomic. Two
        concurrent publishers of a new template may both POST-create.
        """
        options = options or PublishTemplateOptions()
        template = dict(template)
        if options.template_id:
            template["id"] = options.template_id
        if options.source:
            template["source"] = options.source

        template_id = template.get("id")
        if not isinstance(template_id, str) or not template_id:
            raise SpinnakerError("pipeline template has no 'id'")

        try:
            exists = self.exists(template_id)
        except SpinnakerError as exc:
            raise exc.add_context("unable to check status of template")

        url = self._templates_url()
        if exists:
            url = f"{url}/{_segment(template_id)}"
        if options.skip_plan:
            url = f"{url}?skipPlanDependents=true"

        try:
            response = self.transport.post_json(url, template)
        except TransportError as exc:
            raise exc.add_context("pipeline template publish")
        self._log_response(response)

        if response.status_code != httpx.codes.ACCEPTED:
            raise UnexpectedStatusError("create template request failed", response.status_code, response.body)
        return self._decode(TaskRefResponse, response, "create template response")

    def delete(self, template_id: str) -> TaskRefResponse:
        try:
            response = self.transport.delete(f"{self._templates_url()}/{_segment(template_id)}")
        except TransportError as exc:
            raise exc.add_context("delete request failed")
        self._log_response(response)

        if response.status_code != httpx.codes.ACCEPTED:
            raise UnexpectedStatusError("delete request failed", response.status_code, response.body)
        return self._decode(TaskRefResponse, response, "delete template response")

    def plan(
        self,
        configuration: dict[str, Any],
        template: Optional[dict[str, Any]] = None,
    ) -> bytes:
        body = TemplatedPipelineRequest(config=configuration, template=template, plan=True)
        try:
            response = self.transport.post_json(self._url("/pipelines/start"), body.to_json_dict())
        except TransportError as exc:
            raise exc.add_context("pipeline template plan")
        self._log_response(response)

        if response.status_code == httpx.codes.OK:
            return response.body
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise InvalidPipelineTemplateError(response.body, _parse_plan_errors(response.body))
        raise UnexpectedStatusError("plan request failed", response.status_code, response.body)


def _parse_plan_errors(body: bytes) -> Optional[TemplatedPipelineErrorResponse]:
    try:
        return TemplatedPipelineErrorResponse.model_validate_json(body)
    except ValidationError:
        logger.debug("plan error payload does not match the validation error schema")
        return None


class SessionAPI(_BaseAPI):
    """Form login against fiat-backed gate."""

    def fiat_login(self, username: str, password: str) -> None:
        data = {"username": username, "password": password, "submit": "Login"}
        try:
            response = self.transport.post_form(self._url("/login"), data)
        except TransportError as exc:
            raise exc.add_context("fiat login")
        logger.debug("Login response status=%s", response.status_code)


@dataclass
class SpinnakerClient:
    """All capabilities over one transport."""

    transport: HTTPTransport
    applications: ApplicationAPI = field(init=False)
    pipelines: PipelineAPI = field(init=False)
    templates: TemplateAPI = field(init=False)
    tasks: TaskAPI = field(init=False)
    session: SessionAPI = field(init=False)

    def __post_init__(self) -> None:
        self.applications = ApplicationAPI(self.transport)
        self.pipelines = PipelineAPI(self.transport)
        self.templates = TemplateAPI(self.transport)
        self.tasks = TaskAPI(self.transport)
        self.session = SessionAPI(self.transport)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> "SpinnakerClient":
        return cls(HTTPTransport(config, client=http_client))

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "SpinnakerClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


__all__ = [
    "ApplicationAPI",
    "PipelineAPI",
    "PublishTemplateOptions",
    "SessionAPI",
    "SpinnakerClient",
    "TaskAPI",
    "TemplateAPI",
]
