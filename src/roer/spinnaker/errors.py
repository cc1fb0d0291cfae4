"""Exception hierarchy for the Spinnaker API client.

Every failure raised by the client derives from ``SpinnakerError``. Context
is prepended as an error crosses layers (``add_context``) so the message read
at the CLI boundary describes the whole call chain, e.g.::

    publishing template: failed polling task status: GET https://gate/tasks/1: timed out
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interpreter import TaskOutcome
    from .models import TemplatedPipelineErrorResponse


class SpinnakerError(RuntimeError):
    """Base exception for Spinnaker client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, context: str) -> "SpinnakerError":
        """Prepend *context* to the rendered message and return self."""
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class ClientConfigError(SpinnakerError):
    """Raised when the client configuration is incomplete or invalid."""


class TransportError(SpinnakerError):
    """Connection or IO failure on a single HTTP call. Never retried."""

    def __init__(self, method: str, url: str, reason: str, timed_out: bool = False):
        super().__init__(f"{method} {url}: {reason}")
        self.method = method
        self.url = url
        self.timed_out = timed_out


class UnexpectedStatusError(SpinnakerError):
    """The server answered with a status code the endpoint does not expect."""

    def __init__(self, message: str, status_code: int, body: bytes = b""):
        super().__init__(f"{message} (status {status_code})")
        self.status_code = status_code
        self.body = body


class DecodeError(SpinnakerError):
    """A response body did not match the expected schema."""

    def __init__(self, message: str, body: bytes | str = b""):
        super().__init__(message)
        self.body = body


class TaskTimeoutError(SpinnakerError):
    """The poller's deadline elapsed before the task completed."""

    def __init__(self, ref: str, timeout: float):
        super().__init__("timed out waiting for task to complete")
        self.ref = ref
        self.timeout = timeout


class PollLoopError(SpinnakerError):
    """The poll loop ended without completion or timeout. Indicates a bug."""


class TaskFailedError(SpinnakerError):
    """A task reached the terminal failure status."""

    def __init__(self, outcome: "TaskOutcome"):
        super().__init__(f"task finished with status {outcome.status}")
        self.outcome = outcome


class InvalidPipelineTemplateError(SpinnakerError):
    """Plan rejected the template or configuration (HTTP 400).

    ``body`` always holds the raw response; ``error_response`` holds the
    decoded validation payload when the body matches its schema.
    """

    def __init__(self, body: bytes, error_response: "TemplatedPipelineErrorResponse | None" = None):
        super().__init__("pipeline template is invalid")
        self.body = body
        self.error_response = error_response


__all__ = [
    "ClientConfigError",
    "DecodeError",
    "InvalidPipelineTemplateError",
    "PollLoopError",
    "SpinnakerError",
    "TaskFailedError",
    "TaskTimeoutError",
    "TransportError",
    "UnexpectedStatusError",
]
