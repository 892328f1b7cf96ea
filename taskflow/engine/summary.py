"""Pure renderers over a run's result set."""

from __future__ import annotations

from typing import Mapping

from taskflow.core.task.models import RunReport, TaskResult

_RULE = "=" * 50


def render_summary(results: Mapping[str, TaskResult], name: str = "") -> str:
    """Return a human-readable report of *results*.

    Lists one line per task in recorded order: status glyph, task id,
    duration and, for failures, the error.
    """
    values = list(results.values())
    successful = sum(1 for r in values if r.success)
    failed = len(values) - successful
    total_time = sum(r.duration_seconds for r in values)

    lines = [
        f"Task Orchestration Summary: {name}",
        _RULE,
        f"Successful: {successful}",
        f"Failed: {failed}",
        f"Total Time: {total_time:.1f}s",
        "",
        "Task Details:",
    ]
    for result in values:
        glyph = "✔" if result.success else "✘"
        line = f"{glyph} {result.task_id}: {result.duration_seconds:.1f}s"
        if result.error:
            line += f" ({result.error})"
        lines.append(line)

    return "\n".join(lines) + "\n"


def build_report(
    results: Mapping[str, TaskResult],
    name: str = "",
    run_id: str = "",
) -> RunReport:
    """Aggregate *results* into a serialisable :class:`RunReport`."""
    values = list(results.values())
    successful = sum(1 for r in values if r.success)
    return RunReport(
        name=name,
        run_id=run_id,
        successful=successful,
        failed=len(values) - successful,
        total_duration_seconds=round(sum(r.duration_seconds for r in values), 4),
        success_rate=(successful / len(values)) * 100 if values else 0.0,
        tasks=values,
    )
