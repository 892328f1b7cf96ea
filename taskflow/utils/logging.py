"""structlog configuration shared by every module.

Call :func:`setup_logging` once at process start; modules obtain loggers
with :func:`get_logger` and emit snake_case events with key/value fields::

    logger = get_logger("engine.executor")
    logger.info("task_start", task_id="login", attempt=1)
"""

from __future__ import annotations

import logging

import structlog

from taskflow.config import settings


def setup_logging(debug: bool | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog for console (default) or JSON output.

    Arguments left as ``None`` fall back to ``settings.debug`` and
    ``settings.log_json`` (``TASKFLOW_DEBUG`` / ``TASKFLOW_LOG_JSON``).
    """
    if debug is None:
        debug = settings.debug
    if json_logs is None:
        json_logs = settings.log_json

    level = logging.DEBUG if debug else logging.INFO

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    """Return a structlog logger tagged with *name*."""
    return structlog.get_logger().bind(logger=name)
