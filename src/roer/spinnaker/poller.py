"""Blocking task poller.

Fetches a task's status once per interval until the execution records an end
time or the overall timeout elapses. Fetches are strictly sequential and each
result is checked before the next wait begins.

The deadline is checked between ticks. To keep a slow status fetch from
overrunning the timeout, every fetch is given a request timeout bounded by the
remaining budget, and each wait is clamped to that budget as well.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Callable

from .errors import PollLoopError, SpinnakerError, TaskTimeoutError, TransportError
from .interfaces import TaskOperations
from .models import ExecutionResponse

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0
# Smallest request timeout handed to a fetch issued right at the deadline.
MIN_FETCH_TIMEOUT = 0.5


class TaskPoller:
    """Poll a task reference until completion or timeout."""

    def __init__(
        self,
        tasks: TaskOperations,
        interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval <= 0:
            raise ValueError("poll interval must be greater than zero")
        self._tasks = tasks
        self._interval = interval
        self._clock = clock
        self._sleep = sleep

    def poll(self, ref: str, timeout: float) -> ExecutionResponse:
        """Block until the task behind *ref* completes.

        Args:
            ref: Task reference returned by a submission
            timeout: Overall budget in seconds

        Returns:
            The first execution snapshot with an end time

        Raises:
            TaskTimeoutError: The budget elapsed before completion was observed
            SpinnakerError: A status fetch failed; the loop is not retried
        """
        if not ref:
            raise ValueError("task reference must not be empty")
        if timeout <= 0:
            raise ValueError("timeout must be greater than zero")

        logger.info("Waiting for task to complete... (ref=%s)", ref)
        deadline = self._clock() + timeout

        for tick in itertools.count(1):
            execution = self._fetch(ref, timeout, deadline)
            if execution.is_complete:
                logger.debug("Task %s completed on poll %d with status %s", ref, tick, execution.status)
                return execution

            remaining = deadline - self._clock()
            if remaining <= 0:
                raise TaskTimeoutError(ref, timeout)

            logger.debug("Polling task (status=%s, poll=%d)", execution.status, tick)
            self._sleep(min(self._interval, remaining))

        raise PollLoopError("exited poll loop before completion")

    def _fetch(self, ref: str, timeout: float, deadline: float) -> ExecutionResponse:
        remaining = deadline - self._clock()
        try:
            return self._tasks.get_task(ref, timeout=max(remaining, MIN_FETCH_TIMEOUT))
        except TransportError as exc:
            if exc.timed_out and self._clock() >= deadline:
                raise TaskTimeoutError(ref, timeout) from exc
            raise exc.add_context("failed polling task status")
        except SpinnakerError as exc:
            raise exc.add_context("failed polling task status")


__all__ = ["DEFAULT_POLL_INTERVAL", "TaskPoller"]
