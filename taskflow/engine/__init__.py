"""Execution engine -- runs task graphs with timeouts, retries and abort policy.

Public API::

    from taskflow.engine import (
        TaskExecutor,
        TaskOrchestrator,
        build_report,
        render_summary,
    )
"""

from taskflow.engine.executor import TaskExecutor
from taskflow.engine.orchestrator import TaskOrchestrator
from taskflow.engine.summary import build_report, render_summary

__all__ = [
    "TaskExecutor",
    "TaskOrchestrator",
    "build_report",
    "render_summary",
]
