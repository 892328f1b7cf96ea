"""Run-scoped state shared by every task body."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from taskflow.core.task.models import TaskResult
from taskflow.utils.logging import get_logger


@dataclass
class ExecutionContext:
    """Shared by reference across all task bodies of one run.

    ``results`` is a read-only live view of the run's result set; later tasks
    can inspect earlier outputs but only the engine inserts entries.
    ``resource`` (e.g. a browser session) and ``config`` belong to the caller
    and are passed through untouched.
    """

    results: Mapping[str, TaskResult] = field(
        default_factory=lambda: MappingProxyType({})
    )
    config: Any = None
    resource: Any = None
    logger: Any = field(default_factory=lambda: get_logger("task.context"))
    run_id: str = ""

    def get_result(self, task_id: str) -> TaskResult | None:
        return self.results.get(task_id)

    def get_data(self, task_id: str, default: Any = None) -> Any:
        """Return the payload of a successful earlier task, else *default*."""
        result = self.results.get(task_id)
        if result is None or not result.success:
            return default
        return result.data
