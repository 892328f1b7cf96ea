"""Explicit registry of reusable task types."""

from __future__ import annotations

from typing import Any

from taskflow.core.task.base import BaseTask
from taskflow.core.task.models import TaskDescriptor
from taskflow.utils.exceptions import TaskTypeNotFoundError
from taskflow.utils.logging import get_logger

logger = get_logger(__name__)


class TaskRegistry:
    """Maps task type names to :class:`BaseTask` subclasses.

    A registry is an ordinary object owned by the caller, so its lifetime is
    whatever the caller gives it (a process, a test)::

        registry = TaskRegistry()
        registry.register(LoginTask)
        orchestrator.register(registry.descriptor("login", critical=True))
    """

    def __init__(self) -> None:
        self._task_types: dict[str, type[BaseTask]] = {}

    # ------------------------------------------------------------------
    # Registration & lookup
    # ------------------------------------------------------------------

    def register(self, task_cls: type[BaseTask], name: str | None = None) -> None:
        """Add *task_cls* under *name* (default: ``task_cls.name``).

        An existing entry with the same name is overwritten.
        """
        key = name or task_cls.name
        if not key:
            raise ValueError(f"{task_cls.__name__} has no name to register under")
        if key in self._task_types:
            logger.warning(
                "task_type_overwritten",
                name=key,
                old=self._task_types[key].__name__,
                new=task_cls.__name__,
            )
        self._task_types[key] = task_cls
        logger.debug("task_type_registered", name=key)

    def get(self, name: str) -> type[BaseTask]:
        """Return the class registered under *name*.

        Raises :class:`TaskTypeNotFoundError` if no such class exists.
        """
        task_cls = self._task_types.get(name)
        if task_cls is None:
            raise TaskTypeNotFoundError(name)
        return task_cls

    def create(self, name: str, *args: Any, **kwargs: Any) -> BaseTask:
        """Instantiate the task type registered under *name*."""
        return self.get(name)(*args, **kwargs)

    def descriptor(self, name: str, task_id: str | None = None, **overrides: Any) -> TaskDescriptor:
        """Instantiate *name* with no arguments and describe it for registration."""
        return self.create(name).to_descriptor(task_id=task_id or name, **overrides)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def names(self) -> list[str]:
        return list(self._task_types)

    def clear(self) -> None:
        self._task_types.clear()

    def __len__(self) -> int:
        return len(self._task_types)

    def __contains__(self, name: str) -> bool:
        return name in self._task_types
