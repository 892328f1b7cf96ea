"""Task scheduling with topological sort.

Takes the registered :class:`~taskflow.core.task.models.TaskDescriptor`
objects (keyed by id, in registration order) and produces one linear
execution order in which every task appears after all of its dependencies.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Mapping

from taskflow.core.task.models import TaskDescriptor
from taskflow.utils.exceptions import CyclicDependencyError, TaskNotFoundError
from taskflow.utils.logging import get_logger

logger = get_logger("task.scheduler")


class _VisitState(Enum):
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


class TaskScheduler:
    """Produces a dependency-respecting execution order.

    The scheduler performs a depth-first, post-order topological sort over
    the task graph.  Roots are taken in registration order and dependencies
    in declaration order, so the result is deterministic for a given
    registration sequence.
    """

    def build_order(self, tasks: Mapping[str, TaskDescriptor]) -> list[str]:
        """Return task IDs in execution order.

        Raises :class:`CyclicDependencyError` when the graph has a cycle and
        :class:`TaskNotFoundError` when a dependency was never registered.
        Either way no order is returned.
        """
        state: dict[str, _VisitState] = {}
        order: list[str] = []

        for root_id in tasks:
            if state.get(root_id) is _VisitState.DONE:
                continue
            self._visit(root_id, tasks, state, order)

        logger.info("schedule_complete", total_tasks=len(order), order=order)
        return order

    # ----- Internal helpers -------------------------------------------------

    @staticmethod
    def _visit(
        root_id: str,
        tasks: Mapping[str, TaskDescriptor],
        state: dict[str, _VisitState],
        order: list[str],
    ) -> None:
        """Post-order walk from *root_id* using an explicit stack.

        Each stack frame holds a task ID and an iterator over its remaining
        dependencies, mirroring the frames of the equivalent recursion.
        """
        state[root_id] = _VisitState.IN_PROGRESS
        stack: list[tuple[str, Iterator[str]]] = [
            (root_id, iter(tasks[root_id].dependencies))
        ]

        while stack:
            task_id, pending = stack[-1]
            for dep_id in pending:
                dep_state = state.get(dep_id, _VisitState.UNVISITED)
                if dep_state is _VisitState.DONE:
                    continue
                if dep_state is _VisitState.IN_PROGRESS:
                    path = [frame_id for frame_id, _ in stack]
                    cycle = path[path.index(dep_id):] + [dep_id]
                    logger.error("cyclic_dependency", task_id=dep_id, cycle=cycle)
                    raise CyclicDependencyError(dep_id, cycle)
                if dep_id not in tasks:
                    logger.error(
                        "unknown_dependency",
                        task_id=task_id,
                        missing_dep=dep_id,
                    )
                    raise TaskNotFoundError(dep_id)

                state[dep_id] = _VisitState.IN_PROGRESS
                stack.append((dep_id, iter(tasks[dep_id].dependencies)))
                break
            else:
                # All dependencies of task_id are done.
                stack.pop()
                state[task_id] = _VisitState.DONE
                order.append(task_id)
