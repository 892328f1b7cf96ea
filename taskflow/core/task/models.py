"""Task-related data models for the orchestration engine.

Defines the static description of a task, the structured outcome recorded
for each task during a run, and the JSON-friendly report built from those
outcomes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskflow.core.retry import RetryPolicy
from taskflow.core.task.base import FunctionTask, TaskBody


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FailureKind(str, Enum):
    """Why a task result is a failure."""

    EXECUTION = "execution"
    TIMEOUT = "timeout"
    DEPENDENCY = "dependency"


class TaskDescriptor(BaseModel):
    """Static, caller-supplied description of one task.

    Attributes:
        id: Unique identifier within one orchestrator.
        name: Display name; defaults to ``id``.
        description: Display-only free text.
        dependencies: IDs of tasks that must succeed first.  Duplicates are
            dropped, keeping the first occurrence.
        timeout: Seconds allowed for a single attempt.  ``None`` defers to
            the executor's default.
        retry_budget: Additional attempts allowed after the first failure.
        critical: When ``True`` a final failure aborts the whole run.
        body: The work itself.  A bare ``async def fn(context)`` is accepted
            and wrapped in :class:`FunctionTask`.
        retry_policy: Optional per-task override of the executor's
            inter-retry delay strategy.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    dependencies: tuple[str, ...] = ()
    timeout: float | None = Field(default=None, gt=0)
    retry_budget: int = Field(default=0, ge=0)
    critical: bool = False
    body: TaskBody
    retry_policy: RetryPolicy | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": data.get("id", "")}
        return data

    @field_validator("dependencies")
    @classmethod
    def _dedupe_dependencies(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @field_validator("body", mode="before")
    @classmethod
    def _wrap_callable(cls, value: Any) -> Any:
        if not isinstance(value, TaskBody) and callable(value):
            return FunctionTask(value)
        return value


class TaskResult(BaseModel):
    """Outcome of one task within a run.

    Exactly one result exists per task that was attempted or blocked by a
    dependency.  Tasks skipped because the run aborted have no result.

    Attributes:
        task_id: The originating task's identifier.
        success: Whether the task body eventually completed.
        start_time: When the first attempt (or the dependency check) began.
        end_time: When the final outcome was known.
        duration_seconds: Wall-clock time across all attempts and retry delays.
        data: The body's return value on success.
        error: Human-readable error message on failure.
        failure_kind: Category of the failure, ``None`` on success.
        retry_count: Retries consumed (0 if the first attempt succeeded).
    """

    task_id: str
    success: bool
    start_time: datetime = Field(default_factory=utcnow)
    end_time: datetime = Field(default_factory=utcnow)
    duration_seconds: float = 0.0
    data: Any = None
    error: str | None = None
    failure_kind: FailureKind | None = None
    retry_count: int = 0

    @classmethod
    def dependency_blocked(cls, task_id: str, error: str) -> TaskResult:
        """Result for a task whose body was never invoked."""
        now = utcnow()
        return cls(
            task_id=task_id,
            success=False,
            start_time=now,
            end_time=now,
            duration_seconds=0.0,
            error=error,
            failure_kind=FailureKind.DEPENDENCY,
        )


class RunReport(BaseModel):
    """Aggregated, serialisable view of a run's results.

    Attributes:
        name: The orchestrator's name.
        run_id: Identifier of the run the results belong to.
        successful: Number of successful tasks.
        failed: Number of failed tasks.
        total_duration_seconds: Sum of task durations.
        success_rate: Percentage of recorded tasks that succeeded.
        tasks: Every recorded result, in execution order.
        generated_at: When the report was built.
    """

    name: str = ""
    run_id: str = ""
    successful: int = 0
    failed: int = 0
    total_duration_seconds: float = 0.0
    success_rate: float = 0.0
    tasks: list[TaskResult] = []
    generated_at: datetime = Field(default_factory=utcnow)
