"""Spinnaker gate API client: transport, task polling and result interpretation."""

from .client import (
    ApplicationAPI,
    PipelineAPI,
    PublishTemplateOptions,
    SessionAPI,
    SpinnakerClient,
    TaskAPI,
    TemplateAPI,
)
from .config import ClientConfig
from .errors import (
    ClientConfigError,
    DecodeError,
    InvalidPipelineTemplateError,
    PollLoopError,
    SpinnakerError,
    TaskFailedError,
    TaskTimeoutError,
    TransportError,
    UnexpectedStatusError,
)
from .http import HTTPResponse, HTTPTransport
from .interpreter import TaskOutcome, interpret_execution
from .models import (
    ExecutionResponse,
    RetrofitErrorResponse,
    TaskRefResponse,
    TemplatedPipelineError,
    TemplatedPipelineErrorResponse,
)
from .poller import DEFAULT_POLL_INTERVAL, TaskPoller

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "ApplicationAPI",
    "ClientConfig",
    "ClientConfigError",
    "DecodeError",
    "ExecutionResponse",
    "HTTPResponse",
    "HTTPTransport",
    "InvalidPipelineTemplateError",
    "PipelineAPI",
    "PollLoopError",
    "PublishTemplateOptions",
    "RetrofitErrorResponse",
    "SessionAPI",
    "SpinnakerClient",
    "SpinnakerError",
    "TaskAPI",
    "TaskFailedError",
    "TaskOutcome",
    "TaskPoller",
    "TaskRefResponse",
    "TaskTimeoutError",
    "TemplateAPI",
    "TemplatedPipelineError",
    "TemplatedPipelineErrorResponse",
    "TransportError",
    "UnexpectedStatusError",
    "interpret_execution",
]
