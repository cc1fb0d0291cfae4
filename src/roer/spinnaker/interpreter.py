"""Interpretation of terminal task executions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .models import ExecutionResponse, RetrofitErrorResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    """Success or failure of a completed task.

    On failure ``retrofit_error`` holds the structured error when the
    execution carried a decodable ``exception`` variable, and
    ``decode_error`` explains why it could not be decoded otherwise. Both are
    ``None`` when no exception variable was present.
    """

    execution: ExecutionResponse
    failed: bool
    retrofit_error: Optional[RetrofitErrorResponse] = None
    decode_error: Optional[str] = None

    @property
    def status(self) -> str:
        return self.execution.status

    @property
    def succeeded(self) -> bool:
        return not self.failed


def interpret_execution(execution: ExecutionResponse) -> TaskOutcome:
    """Classify *execution*; only the ``TERMINAL`` status is a failure."""
    if not execution.is_terminal_failure:
        return TaskOutcome(execution=execution, failed=False)

    extraction = execution.extract_retrofit_error()
    if extraction is None:
        return TaskOutcome(execution=execution, failed=True)
    if not extraction.ok:
        logger.warning("Task %s failed with an undecodable exception: %s", execution.id, extraction.decode_error)
    return TaskOutcome(
        execution=execution,
        failed=True,
        retrofit_error=extraction.error,
        decode_error=extraction.decode_error,
    )


__all__ = ["TaskOutcome", "interpret_execution"]
