"""Task executor -- runs one task body under a timeout with bounded retries.

For every :class:`TaskDescriptor` the :class:`TaskExecutor`:

1. Schedules the body as an asyncio task for each attempt.
2. Waits for it at most ``timeout`` seconds.
3. On failure or timeout, waits according to the retry policy and tries
   again until the retry budget is spent.
4. Returns a :class:`TaskResult` summarising the outcome.

A timed-out body is not cancelled unless ``cancel_on_timeout`` is enabled:
the executor stops waiting and the body keeps running unobserved.  Such
bodies are kept in :attr:`TaskExecutor.abandoned_tasks` until they finish so
they are not garbage collected mid-flight; their outcome is logged and
otherwise discarded.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from taskflow.config import settings
from taskflow.core.retry import RetryPolicy, build_retry_policy
from taskflow.core.task.context import ExecutionContext
from taskflow.core.task.models import FailureKind, TaskDescriptor, TaskResult, utcnow
from taskflow.utils.exceptions import TaskAttemptError, TaskTimeoutError
from taskflow.utils.logging import get_logger


class TaskExecutor:
    """Execute individual tasks with timeout and retry handling.

    Parameters
    ----------
    retry_policy:
        Delay strategy between attempts.  Defaults to the policy described
        by the global settings (a constant 2s pause unless configured).
    default_timeout:
        Per-attempt timeout for descriptors that do not set one.
    cancel_on_timeout:
        Cancel a body when its attempt times out instead of leaving it
        running in the background.
    """

    def __init__(
        self,
        retry_policy: RetryPolicy | None = None,
        default_timeout: float | None = None,
        cancel_on_timeout: bool | None = None,
    ) -> None:
        self.retry_policy = retry_policy or build_retry_policy(settings)
        self.default_timeout = (
            default_timeout
            if default_timeout is not None
            else settings.default_timeout_seconds
        )
        self.cancel_on_timeout = (
            cancel_on_timeout
            if cancel_on_timeout is not None
            else settings.cancel_on_timeout
        )
        self._abandoned: set[asyncio.Task] = set()
        self.logger = get_logger("engine.executor")

    @property
    def abandoned_tasks(self) -> frozenset[asyncio.Task]:
        """Timed-out bodies that are still running."""
        return frozenset(self._abandoned)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute_task(
        self,
        descriptor: TaskDescriptor,
        context: ExecutionContext,
    ) -> TaskResult:
        """Execute *descriptor* end-to-end.

        Failures of the body are caught and returned inside the
        :class:`TaskResult` rather than propagated.  Cancellation of the
        caller is not a failure and propagates unchanged.
        """
        start_time = utcnow()
        start = time.monotonic()
        timeout = self._timeout_for(descriptor)
        policy = descriptor.retry_policy or self.retry_policy
        max_attempts = descriptor.retry_budget + 1

        self.logger.info(
            "task_start",
            task_id=descriptor.id,
            name=descriptor.name,
            timeout=timeout,
            max_attempts=max_attempts,
        )

        error = ""
        failure_kind = FailureKind.EXECUTION

        for attempt in range(1, max_attempts + 1):
            try:
                data = await self._attempt(descriptor, context, timeout)
            except TaskTimeoutError as exc:
                error = str(exc)
                failure_kind = FailureKind.TIMEOUT
            except Exception as exc:
                error = str(exc) or exc.__class__.__name__
                failure_kind = FailureKind.EXECUTION
            else:
                duration = time.monotonic() - start
                result = TaskResult(
                    task_id=descriptor.id,
                    success=True,
                    start_time=start_time,
                    end_time=utcnow(),
                    duration_seconds=round(duration, 4),
                    data=data,
                    retry_count=attempt - 1,
                )
                self.logger.info(
                    "task_complete",
                    task_id=descriptor.id,
                    duration=result.duration_seconds,
                    retry_count=result.retry_count,
                )
                return result

            self.logger.warning(
                "task_attempt_failed",
                task_id=descriptor.id,
                attempt=attempt,
                max_attempts=max_attempts,
                failure_kind=failure_kind.value,
                error=error,
            )

            if attempt < max_attempts:
                delay = policy.delay_for(attempt)
                if delay > 0:
                    self.logger.debug("task_retry_wait", task_id=descriptor.id, delay=delay)
                    await asyncio.sleep(delay)

        duration = time.monotonic() - start
        self.logger.error(
            "task_failed",
            task_id=descriptor.id,
            attempts=max_attempts,
            failure_kind=failure_kind.value,
            error=error,
            duration=round(duration, 4),
        )
        return TaskResult(
            task_id=descriptor.id,
            success=False,
            start_time=start_time,
            end_time=utcnow(),
            duration_seconds=round(duration, 4),
            error=error,
            failure_kind=failure_kind,
            retry_count=descriptor.retry_budget,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _timeout_for(self, descriptor: TaskDescriptor) -> float:
        if descriptor.timeout is not None:
            return descriptor.timeout
        return self.default_timeout

    async def _attempt(
        self,
        descriptor: TaskDescriptor,
        context: ExecutionContext,
        timeout: float,
    ) -> Any:
        """Race one body invocation against *timeout*.

        Raises :class:`TaskTimeoutError` if the timer wins, or whatever the
        body raised.
        """
        body_task = asyncio.ensure_future(descriptor.body.run(context))
        try:
            done, _ = await asyncio.wait({body_task}, timeout=timeout)
        except asyncio.CancelledError:
            self._release(descriptor.id, body_task)
            raise

        if body_task not in done:
            self._release(descriptor.id, body_task)
            raise TaskTimeoutError(descriptor.id, timeout)

        if body_task.cancelled():
            raise TaskAttemptError(descriptor.id, "body was cancelled")
        return body_task.result()

    def _release(self, task_id: str, body_task: asyncio.Task) -> None:
        """Stop observing *body_task*, cancelling it if so configured."""
        if self.cancel_on_timeout:
            body_task.cancel()
            self.logger.info("task_body_cancelled", task_id=task_id)
            return

        # TODO: expose a cooperative cancellation token on ExecutionContext so
        # bodies can stop early without being hard-cancelled.
        self._abandoned.add(body_task)
        body_task.add_done_callback(
            lambda finished: self._on_abandoned_done(task_id, finished)
        )
        self.logger.warning("task_body_abandoned", task_id=task_id)

    def _on_abandoned_done(self, task_id: str, body_task: asyncio.Task) -> None:
        self._abandoned.discard(body_task)
        if body_task.cancelled():
            outcome = "cancelled"
        elif body_task.exception() is not None:
            outcome = f"error: {body_task.exception()}"
        else:
            outcome = "completed"
        self.logger.info("abandoned_body_finished", task_id=task_id, outcome=outcome)
