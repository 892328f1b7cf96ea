import asyncio

import pytest
import structlog

from taskflow.core.retry import ConstantDelay
from taskflow.core.task.base import TaskBody
from taskflow.engine.executor import TaskExecutor
from taskflow.engine.orchestrator import TaskOrchestrator


class ScriptedBody(TaskBody):
    """Task body that fails a set number of times before succeeding."""

    def __init__(self, value=None, failures=0, always_fail=False, delay=0.0, error="boom"):
        self.value = value
        self.failures = failures
        self.always_fail = always_fail
        self.delay = delay
        self.error = error
        self.calls = 0
        self.completed = False
        self.seen_contexts = []

    async def run(self, context):
        self.calls += 1
        self.seen_contexts.append(context)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.always_fail or self.calls <= self.failures:
            raise RuntimeError(f"{self.error} (call {self.calls})")
        self.completed = True
        return self.value


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture
def scripted():
    return ScriptedBody


@pytest.fixture
def fast_executor():
    return TaskExecutor(retry_policy=ConstantDelay(0), default_timeout=5.0)


@pytest.fixture
def orchestrator(fast_executor):
    return TaskOrchestrator("test-flow", executor=fast_executor)


@pytest.fixture
def sample_config():
    return {
        "base_url": "https://dealer.example.com",
        "username": "automation",
        "max_vehicles": 3,
    }
