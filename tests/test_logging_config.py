"""Tests for structured logging configuration."""

import json
import logging

import pytest
import structlog

from cli.logging_config import _redact_sensitive, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()


class TestLoggingConfig:
    """Test structlog setup modes."""

    def test_json_mode_writes_parseable_lines(self, capsys):
        setup_logging(json_mode=True, level="DEBUG")
        structlog.get_logger("moments.test").info("moment_created", moment_id="abc")
        err = capsys.readouterr().err.strip().splitlines()
        record = json.loads(err[-1])
        assert record["event"] == "moment_created"
        assert record["moment_id"] == "abc"
        assert record["level"] == "info"

    def test_console_mode(self, capsys):
        setup_logging(json_mode=False, level="DEBUG")
        structlog.get_logger().warning("kv_record_corrupt", key="moments")
        assert "kv_record_corrupt" in capsys.readouterr().err

    def test_level_filtering(self, capsys):
        setup_logging(json_mode=True, level="WARNING")
        assert logging.getLogger().level == logging.WARNING
        structlog.get_logger().info("hidden_event")
        assert "hidden_event" not in capsys.readouterr().err

    def test_default_level_is_info(self):
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_log_file_receives_debug(self, tmp_path):
        log_file = tmp_path / "logs" / "moments.log"
        setup_logging(level="WARNING", log_file=log_file)
        structlog.get_logger().debug("command_dispatched", command="CreateMoment")
        for handler in logging.getLogger().handlers:
            handler.flush()
        lines = log_file.read_text().strip().splitlines()
        assert json.loads(lines[-1])["event"] == "command_dispatched"


class TestRedaction:
    def test_redacts_anthropic_key(self):
        out = _redact_sensitive(None, None, {"event": "x", "key": "sk-ant-REDACTED"})
        assert "REDACTED" in out["key"]
        assert "qrstuvwxyz" not in out["key"]

    def test_leaves_other_values(self):
        out = _redact_sensitive(None, None, {"event": "moment_created", "count": 3})
        assert out == {"event": "moment_created", "count": 3}
