"""Tests for structlog setup and logger construction."""
import logging

import structlog
from structlog.testing import capture_logs

from taskflow.config import Settings
from taskflow.utils import logging as taskflow_logging
from taskflow.utils.logging import get_logger, setup_logging


class TestGetLogger:
    def test_package_imports(self):
        import taskflow

        assert taskflow.TaskOrchestrator is not None

    def test_events_tagged_with_logger_name(self):
        with capture_logs() as logs:
            get_logger("engine.test").info("task_start", task_id="login")

        assert logs == [
            {
                "logger": "engine.test",
                "task_id": "login",
                "event": "task_start",
                "log_level": "info",
            }
        ]

    def test_bound_fields_carry_over(self):
        with capture_logs() as logs:
            get_logger("engine.test").bind(run_id="abc").warning("run_progress")

        assert logs[0]["run_id"] == "abc"
        assert logs[0]["logger"] == "engine.test"


class TestSetupLogging:
    def test_defaults_follow_settings(self, monkeypatch):
        monkeypatch.setattr(
            taskflow_logging,
            "settings",
            Settings(_env_file=None, debug=True, log_json=True),
        )

        setup_logging()

        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.DEBUG)

    def test_explicit_arguments_win(self, monkeypatch):
        monkeypatch.setattr(
            taskflow_logging,
            "settings",
            Settings(_env_file=None, debug=True, log_json=True),
        )

        setup_logging(debug=False, json_logs=False)

        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)
        assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.INFO)

    def test_environment_switches_to_json(self, monkeypatch):
        monkeypatch.setenv("TASKFLOW_LOG_JSON", "true")
        monkeypatch.setattr(taskflow_logging, "settings", Settings(_env_file=None))

        setup_logging()

        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
