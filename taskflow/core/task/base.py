"""Task body interface and reusable task classes.

The engine never looks inside a task; it only awaits :meth:`TaskBody.run`.
Callers either subclass :class:`BaseTask` (reusable, registrable task types)
or wrap a plain coroutine function in :class:`FunctionTask`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Awaitable, Callable

if TYPE_CHECKING:
    from taskflow.core.task.context import ExecutionContext
    from taskflow.core.task.models import TaskDescriptor


class TaskBody(ABC):
    """The opaque unit of work behind a task descriptor."""

    @abstractmethod
    async def run(self, context: ExecutionContext) -> Any:
        """Do the work and return a payload, or raise to signal failure.

        Parameters
        ----------
        context:
            The run-scoped :class:`ExecutionContext`; prior results are
            readable through ``context.results``.
        """
        ...


class FunctionTask(TaskBody):
    """Adapt an ``async def fn(context)`` callable to :class:`TaskBody`."""

    def __init__(self, fn: Callable[[ExecutionContext], Awaitable[Any]]) -> None:
        self.fn = fn

    async def run(self, context: ExecutionContext) -> Any:
        return await self.fn(context)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__qualname__", repr(self.fn))
        return f"FunctionTask({name})"


class BaseTask(TaskBody):
    """Base class for reusable task types.

    Subclasses declare their default metadata as class attributes and
    implement :meth:`run`.  :meth:`to_descriptor` turns an instance into a
    :class:`TaskDescriptor` ready for registration, with any field
    overridable per use.
    """

    name: str = ""
    description: str = ""
    dependencies: tuple[str, ...] = ()
    timeout: float | None = 30.0
    retry_budget: int = 3
    critical: bool = False

    def to_descriptor(self, task_id: str | None = None, **overrides: Any) -> TaskDescriptor:
        from taskflow.core.task.models import TaskDescriptor

        fields: dict[str, Any] = {
            "id": task_id or self.name,
            "name": self.name,
            "description": self.description,
            "dependencies": self.dependencies,
            "timeout": self.timeout,
            "retry_budget": self.retry_budget,
            "critical": self.critical,
        }
        fields.update(overrides)
        return TaskDescriptor(body=self, **fields)
