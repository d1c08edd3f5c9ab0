import logging

import pytest
import structlog

from diff_submitter.infrastructure.observability import logger_factory_service
from diff_submitter.infrastructure.observability.logger_factory_service import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    monkeypatch.setattr(logger_factory_service, "_CONFIGURED", False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_output_goes_to_stderr_with_schema(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging("INFO")

        get_logger("tests").info("Created a new diff", diff_id=7)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert '"message": "Created a new diff"' in captured.err
        assert '"diffId": 7' in captured.err
        assert '"component": "tests"' in captured.err

    def test_level_filters_lower_events(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging("WARNING")

        structlog.get_logger().info("quiet")

        assert capsys.readouterr().err == ""

    def test_only_first_call_takes_effect(self, monkeypatch):
        configure_logging("DEBUG")
        configure_logging("ERROR")

        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging("LOUD")

        assert logging.getLogger().level == logging.WARNING
