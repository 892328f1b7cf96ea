"""Task orchestrator -- runs registered tasks in dependency order.

The :class:`TaskOrchestrator` owns the registered descriptors and the result
set of the current run.  A run:

1. Clears the previous results and builds a fresh :class:`ExecutionContext`.
2. Computes the execution order once via :class:`TaskScheduler`.
3. Walks the order one task at a time.  A task whose dependencies did not all
   succeed is recorded as failed without running; every other task goes
   through the :class:`TaskExecutor`.
4. Stops with :class:`CriticalTaskError` as soon as a critical task fails;
   tasks after it get no result at all.

Tasks never run concurrently, even where the graph would allow it.
"""

from __future__ import annotations

import asyncio
import uuid
from types import MappingProxyType
from typing import Any

from taskflow.config import settings
from taskflow.core.task.context import ExecutionContext
from taskflow.core.task.models import RunReport, TaskDescriptor, TaskResult
from taskflow.core.task.scheduler import TaskScheduler
from taskflow.engine.executor import TaskExecutor
from taskflow.engine.summary import build_report, render_summary
from taskflow.utils.exceptions import (
    CriticalTaskError,
    RunInProgressError,
    RunTimeoutError,
    TaskNotFoundError,
)
from taskflow.utils.logging import get_logger


class TaskOrchestrator:
    """Sequential dependency-graph executor.

    Parameters
    ----------
    name:
        Used for logging and in summaries only.
    executor:
        The :class:`TaskExecutor` that runs individual task bodies.
    scheduler:
        The :class:`TaskScheduler` that orders the task graph.
    run_timeout:
        Optional limit in seconds for a whole :meth:`run_all` call.
    """

    def __init__(
        self,
        name: str,
        executor: TaskExecutor | None = None,
        scheduler: TaskScheduler | None = None,
        run_timeout: float | None = None,
    ) -> None:
        self.name = name
        self.executor = executor or TaskExecutor()
        self.scheduler = scheduler or TaskScheduler()
        self.run_timeout = (
            run_timeout if run_timeout is not None else settings.run_timeout_seconds
        )
        self.logger = get_logger("engine.orchestrator").bind(orchestrator=name)

        self._tasks: dict[str, TaskDescriptor] = {}
        self._results: dict[str, TaskResult] = {}
        self._run_id = ""
        self._running = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, descriptor: TaskDescriptor) -> None:
        """Add *descriptor*; an existing task with the same ID is replaced."""
        if self._running:
            raise RunInProgressError(self.name)
        if descriptor.id in self._tasks:
            self.logger.warning("task_overwritten", task_id=descriptor.id)
        self._tasks[descriptor.id] = descriptor
        self.logger.info(
            "task_registered",
            task_id=descriptor.id,
            name=descriptor.name,
            dependencies=descriptor.dependencies,
            critical=descriptor.critical,
        )

    @property
    def tasks(self) -> dict[str, TaskDescriptor]:
        return dict(self._tasks)

    def execution_order(self) -> list[str]:
        """The order the next run would use."""
        return self.scheduler.build_order(self._tasks)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run_all(self, resource: Any = None, config: Any = None) -> dict[str, TaskResult]:
        """Execute every registered task in dependency order.

        Returns
        -------
        dict[str, TaskResult]
            A copy of the run's results, keyed by task ID.

        Raises
        ------
        GraphError
            The task graph has a cycle or an unknown dependency.  Nothing ran.
        CriticalTaskError
            A critical task failed; later tasks have no result.
        RunTimeoutError
            The run-wide timeout expired.
        RunInProgressError
            Another run on this orchestrator has not finished.
        """
        if self._running:
            raise RunInProgressError(self.name)

        self._running = True
        try:
            self._results.clear()
            self._run_id = uuid.uuid4().hex[:12]
            logger = self.logger.bind(run_id=self._run_id)
            context = ExecutionContext(
                results=MappingProxyType(self._results),
                config=config,
                resource=resource,
                logger=logger,
                run_id=self._run_id,
            )

            logger.info("run_start", total_tasks=len(self._tasks))
            order = self.scheduler.build_order(self._tasks)
            logger.info("execution_order", order=" -> ".join(order))

            if self.run_timeout is None:
                await self._execute(order, context)
            else:
                try:
                    await asyncio.wait_for(
                        self._execute(order, context), timeout=self.run_timeout
                    )
                except asyncio.TimeoutError:
                    logger.error("run_timeout", timeout=self.run_timeout)
                    raise RunTimeoutError(self.name, self.run_timeout) from None

            logger.info(
                "run_complete",
                successful=sum(1 for r in self._results.values() if r.success),
                failed=sum(1 for r in self._results.values() if not r.success),
            )
            return dict(self._results)
        finally:
            self._running = False

    async def run_task(
        self,
        task_id: str,
        resource: Any = None,
        config: Any = None,
    ) -> TaskResult:
        """Run a single registered task in isolation.

        Dependencies are not checked and the result is not recorded in the
        orchestrator's result set.  Earlier results are visible to the body
        through the context.

        Raises :class:`RunInProgressError` while another run or single-task
        run on this orchestrator has not finished.
        """
        if self._running:
            raise RunInProgressError(self.name)
        descriptor = self._tasks.get(task_id)
        if descriptor is None:
            raise TaskNotFoundError(task_id)

        self._running = True
        try:
            run_id = uuid.uuid4().hex[:12]
            context = ExecutionContext(
                results=MappingProxyType(dict(self._results)),
                config=config,
                resource=resource,
                logger=self.logger.bind(run_id=run_id, task_id=task_id),
                run_id=run_id,
            )
            return await self.executor.execute_task(descriptor, context)
        finally:
            self._running = False

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def get_result(self, task_id: str) -> TaskResult | None:
        return self._results.get(task_id)

    def get_all_results(self) -> dict[str, TaskResult]:
        """Snapshot of the current run's results."""
        return dict(self._results)

    def render_summary(self) -> str:
        return render_summary(self._results, name=self.name)

    def build_report(self) -> RunReport:
        return build_report(self._results, name=self.name, run_id=self._run_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _execute(self, order: list[str], context: ExecutionContext) -> None:
        total = len(order)
        for task_id in order:
            descriptor = self._tasks[task_id]

            blocker = self._unsatisfied_dependency(descriptor)
            if blocker is not None:
                dep_id, reason = blocker
                context.logger.warning(
                    "dependency_not_met",
                    task_id=task_id,
                    dependency_id=dep_id,
                    reason=reason,
                )
                result = TaskResult.dependency_blocked(
                    task_id,
                    f"Dependency '{dep_id}' {reason}",
                )
            else:
                result = await self.executor.execute_task(descriptor, context)

            self._results[task_id] = result

            if not result.success and descriptor.critical:
                context.logger.error(
                    "critical_task_failed",
                    task_id=task_id,
                    error=result.error,
                    skipped=total - len(self._results),
                )
                raise CriticalTaskError(task_id, result.error, dict(self._results))

            context.logger.info(
                "run_progress",
                completed=sum(1 for r in self._results.values() if r.success),
                total=total,
            )

    def _unsatisfied_dependency(self, descriptor: TaskDescriptor) -> tuple[str, str] | None:
        """Return ``(dependency_id, reason)`` for the first unmet dependency."""
        for dep_id in descriptor.dependencies:
            dep_result = self._results.get(dep_id)
            if dep_result is None:
                return dep_id, "has no result"
            if not dep_result.success:
                return dep_id, "did not complete successfully"
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._tasks
