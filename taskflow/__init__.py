"""Dependency-graph task orchestration for multi-step async workflows."""

from taskflow.core.retry import ConstantDelay, ExponentialBackoff, RetryPolicy
from taskflow.core.task.base import BaseTask, FunctionTask, TaskBody
from taskflow.core.task.context import ExecutionContext
from taskflow.core.task.models import FailureKind, RunReport, TaskDescriptor, TaskResult
from taskflow.core.task.registry import TaskRegistry
from taskflow.core.task.scheduler import TaskScheduler
from taskflow.engine import TaskExecutor, TaskOrchestrator, build_report, render_summary
from taskflow.utils.exceptions import (
    CriticalTaskError,
    CyclicDependencyError,
    GraphError,
    OrchestratorError,
    RunInProgressError,
    RunTimeoutError,
    TaskNotFoundError,
    TaskTimeoutError,
    TaskTypeNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "BaseTask",
    "ConstantDelay",
    "CriticalTaskError",
    "CyclicDependencyError",
    "ExecutionContext",
    "ExponentialBackoff",
    "FailureKind",
    "FunctionTask",
    "GraphError",
    "OrchestratorError",
    "RetryPolicy",
    "RunInProgressError",
    "RunReport",
    "RunTimeoutError",
    "TaskBody",
    "TaskDescriptor",
    "TaskExecutor",
    "TaskNotFoundError",
    "TaskOrchestrator",
    "TaskRegistry",
    "TaskResult",
    "TaskScheduler",
    "TaskTimeoutError",
    "TaskTypeNotFoundError",
    "build_report",
    "render_summary",
]
