"""Unit tests for logging configuration."""

import json
import logging

import pytest
import structlog

from box_harness.logging import HTTP_LOGGERS, configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    http_levels = {name: logging.getLogger(name).level for name in HTTP_LOGGERS}
    yield
    for name, http_level in http_levels.items():
        logging.getLogger(name).setLevel(http_level)
    structlog.reset_defaults()
    # Drop the plain handlers configure_logging installed; pytest's own are subclasses
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_root_level(self):
        configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging("chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_json_output_to_file(self, tmp_path):
        log_file = tmp_path / "harness.log"
        configure_logging("info", log_file=log_file, json_output=True)

        get_logger("box_harness.test").info("command_executed", resource_id="F1")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "command_executed"
        assert record["resource_id"] == "F1"
        assert record["level"] == "info"
        assert record["logger"] == "box_harness.test"

    def test_console_renderer_by_default(self):
        configure_logging("info")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_log_file_defaults_to_json(self, tmp_path):
        configure_logging("info", log_file=tmp_path / "harness.log")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_log_file_can_use_console_output(self, tmp_path):
        configure_logging("info", log_file=tmp_path / "harness.log", json_output=False)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_http_request_logging_quiet_above_debug(self):
        configure_logging("info")
        assert all(logging.getLogger(name).level == logging.WARNING for name in HTTP_LOGGERS)

    def test_http_request_logging_at_debug(self):
        configure_logging("debug")
        assert all(logging.getLogger(name).level == logging.DEBUG for name in HTTP_LOGGERS)
