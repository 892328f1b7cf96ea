"""Tests for per-task timeout and retry handling."""
import asyncio
from types import MappingProxyType

import pytest

from taskflow.core.retry import RetryPolicy
from taskflow.core.task.context import ExecutionContext
from taskflow.core.task.models import FailureKind, TaskDescriptor
from taskflow.engine.executor import TaskExecutor


class RecordingPolicy(RetryPolicy):
    def __init__(self):
        self.requested = []

    def delay_for(self, retry_number):
        self.requested.append(retry_number)
        return 0.0


@pytest.fixture
def context():
    return ExecutionContext(results=MappingProxyType({}), config={"env": "test"})


class TestExecuteTask:
    @pytest.mark.asyncio
    async def test_first_attempt_success(self, fast_executor, context, scripted):
        body = scripted(value={"rows": 4})
        task = TaskDescriptor(id="extract", body=body)

        result = await fast_executor.execute_task(task, context)

        assert result.success is True
        assert result.data == {"rows": 4}
        assert result.retry_count == 0
        assert result.error is None
        assert result.failure_kind is None
        assert result.end_time >= result.start_time
        assert body.calls == 1

    @pytest.mark.asyncio
    async def test_succeeds_on_third_attempt(self, fast_executor, context, scripted):
        body = scripted(value="ok", failures=2)
        task = TaskDescriptor(id="flaky", retry_budget=2, body=body)

        result = await fast_executor.execute_task(task, context)

        assert result.success is True
        assert result.retry_count == 2
        assert body.calls == 3

    @pytest.mark.asyncio
    async def test_exhausted_retries(self, fast_executor, context, scripted):
        body = scripted(always_fail=True, error="selector missing")
        task = TaskDescriptor(id="click", retry_budget=1, body=body)

        result = await fast_executor.execute_task(task, context)

        assert result.success is False
        assert result.retry_count == 1
        assert result.failure_kind == FailureKind.EXECUTION
        assert result.error == "selector missing (call 2)"
        assert body.calls == 2

    @pytest.mark.asyncio
    async def test_no_retry_budget_means_one_attempt(self, fast_executor, context, scripted):
        body = scripted(always_fail=True)
        task = TaskDescriptor(id="once", body=body)

        result = await fast_executor.execute_task(task, context)

        assert result.success is False
        assert result.retry_count == 0
        assert body.calls == 1

    @pytest.mark.asyncio
    async def test_exception_without_message(self, fast_executor, context):
        async def body(ctx):
            raise KeyError()

        result = await fast_executor.execute_task(TaskDescriptor(id="k", body=body), context)
        assert result.success is False
        assert result.error

    @pytest.mark.asyncio
    async def test_body_receives_context(self, fast_executor, context, scripted):
        body = scripted(value=1)
        await fast_executor.execute_task(TaskDescriptor(id="t", body=body), context)
        assert body.seen_contexts == [context]

    @pytest.mark.asyncio
    async def test_retry_policy_consulted_between_attempts(self, context, scripted):
        policy = RecordingPolicy()
        executor = TaskExecutor(retry_policy=policy)
        task = TaskDescriptor(id="t", retry_budget=3, body=scripted(always_fail=True))

        await executor.execute_task(task, context)

        assert policy.requested == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_descriptor_policy_overrides_executor(self, context, scripted):
        executor_policy = RecordingPolicy()
        task_policy = RecordingPolicy()
        executor = TaskExecutor(retry_policy=executor_policy)
        task = TaskDescriptor(
            id="t",
            retry_budget=1,
            retry_policy=task_policy,
            body=scripted(always_fail=True),
        )

        await executor.execute_task(task, context)

        assert task_policy.requested == [1]
        assert executor_policy.requested == []


class TestTimeout:
    @pytest.mark.asyncio
    async def test_timeout_recorded_and_body_keeps_running(self, fast_executor, context, scripted):
        body = scripted(value="late", delay=0.2)
        task = TaskDescriptor(id="slow", timeout=0.05, body=body)

        result = await fast_executor.execute_task(task, context)

        assert result.success is False
        assert result.failure_kind == FailureKind.TIMEOUT
        assert "timeout" in result.error.lower()
        assert body.completed is False
        assert len(fast_executor.abandoned_tasks) == 1

        await asyncio.sleep(0.3)

        assert body.completed is True
        assert fast_executor.abandoned_tasks == frozenset()

    @pytest.mark.asyncio
    async def test_timeout_then_retry_succeeds(self, context):
        calls = []

        async def body(ctx):
            calls.append(1)
            if len(calls) == 1:
                await asyncio.sleep(0.2)
            return len(calls)

        executor = TaskExecutor(retry_policy=RecordingPolicy(), cancel_on_timeout=True)
        task = TaskDescriptor(id="t", timeout=0.05, retry_budget=1, body=body)

        result = await executor.execute_task(task, context)

        assert result.success is True
        assert result.data == 2
        assert result.retry_count == 1

    @pytest.mark.asyncio
    async def test_cancel_on_timeout(self, context, scripted):
        body = scripted(value="late", delay=0.2)
        executor = TaskExecutor(retry_policy=RecordingPolicy(), cancel_on_timeout=True)
        task = TaskDescriptor(id="slow", timeout=0.05, body=body)

        result = await executor.execute_task(task, context)
        await asyncio.sleep(0.3)

        assert result.failure_kind == FailureKind.TIMEOUT
        assert body.completed is False
        assert executor.abandoned_tasks == frozenset()

    @pytest.mark.asyncio
    async def test_default_timeout_applies(self, context, scripted):
        body = scripted(delay=0.2)
        executor = TaskExecutor(
            retry_policy=RecordingPolicy(),
            default_timeout=0.05,
            cancel_on_timeout=True,
        )

        result = await executor.execute_task(TaskDescriptor(id="t", body=body), context)

        assert result.failure_kind == FailureKind.TIMEOUT
