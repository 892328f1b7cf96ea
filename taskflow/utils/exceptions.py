class OrchestratorError(Exception):
    """Base exception for the task orchestration engine."""


class GraphError(OrchestratorError):
    """The registered task graph cannot be ordered."""


class CyclicDependencyError(GraphError):
    def __init__(self, task_id: str, cycle: list[str] | None = None):
        self.task_id = task_id
        self.cycle = cycle or [task_id]
        super().__init__(
            f"Circular dependency detected involving task: {task_id} "
            f"({' -> '.join(self.cycle)})"
        )


class TaskNotFoundError(GraphError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class TaskTimeoutError(OrchestratorError):
    def __init__(self, task_id: str, timeout: float):
        self.task_id = task_id
        self.timeout = timeout
        super().__init__(f"Task timeout: {task_id} exceeded {timeout:g}s")


class TaskAttemptError(OrchestratorError):
    def __init__(self, task_id: str, detail: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' attempt failed: {detail}")


class CriticalTaskError(OrchestratorError):
    """Raised by a run when a critical task ends in failure.

    ``results`` holds the results recorded up to and including the failing
    task; tasks that never ran are absent.
    """

    def __init__(self, task_id: str, error: str | None, results: dict | None = None):
        self.task_id = task_id
        self.error = error
        self.results = results or {}
        super().__init__(f"Critical task failed: {task_id} - {error}")


class RunInProgressError(OrchestratorError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Orchestrator '{name}' is already running")


class RunTimeoutError(OrchestratorError):
    def __init__(self, name: str, timeout: float):
        self.name = name
        self.timeout = timeout
        super().__init__(f"Global timeout of {timeout:g}s exceeded for '{name}'")


class TaskTypeNotFoundError(OrchestratorError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task type not registered: {name}")
