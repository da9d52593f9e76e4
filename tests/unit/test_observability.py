"""Tests for the logging module."""

import json
import os
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from loguru import logger

from onetimeinit.observability.logging import (
    LogContext,
    _format_for_json,
    configure_logging,
    configure_logging_from_env,
    get_logger,
    locator_logging_context,
    migration_logging_context,
)


@pytest.fixture
def captured():
    """Capture loguru records (with extras) emitted during a test."""
    records = []
    handler_id = logger.add(lambda m: records.append(m.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def make_record(message, extra=None):
    level_mock = MagicMock()
    level_mock.name = "INFO"
    return {
        "time": datetime(2025, 1, 15, 10, 30, 45, tzinfo=UTC),
        "level": level_mock,
        "message": message,
        "name": "onetimeinit.migrations.dialer",
        "function": "relink_dialer_shortcuts",
        "line": 42,
        "extra": extra or {},
        "exception": None,
    }


class TestLogContext:
    """Tests for LogContext dataclass."""

    def test_default_values(self):
        ctx = LogContext()
        assert ctx.mapping_version is None
        assert ctx.migration is None
        assert ctx.locator is None
        assert ctx.render() == ""
        assert ctx.as_dict() == {}

    def test_from_extra_ignores_other_keys(self):
        ctx = LogContext.from_extra(
            {"mapping_version": 1, "locator": "content://a/favorites", "module": "x"}
        )

        assert ctx.as_dict() == {"mapping_version": 1, "locator": "content://a/favorites"}
        assert ctx.render() == " [v1 content://a/favorites]"


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_default(self):
        configure_logging()
        # Should not raise

    def test_configure_json_logs(self):
        configure_logging(json_logs=True)
        # Should not raise

    def test_configure_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "oti.log"

        configure_logging(level="DEBUG", log_file=str(log_file))
        logger.info("hello file")
        logger.complete()

        assert "hello file" in log_file.read_text()
        configure_logging()


class TestConfigureLoggingFromEnv:
    """Tests for environment-based logging configuration."""

    def test_configure_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            configure_logging_from_env()

    def test_configure_from_env_json_format(self):
        with patch.dict(
            os.environ,
            {"ONETIMEINIT_LOG_FORMAT": "json", "ONETIMEINIT_LOG_LEVEL": "info"},
            clear=True,
        ):
            configure_logging_from_env()
        configure_logging()


class TestJsonFormatting:
    """Tests for JSON log formatting."""

    def test_format_basic_log(self):
        parsed = json.loads(_format_for_json(make_record("Total launcher icons: 3")))

        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Total launcher icons: 3"
        assert parsed["logger"] == "onetimeinit.migrations.dialer"
        assert parsed["line"] == 42
        assert "context" not in parsed

    def test_format_log_with_context(self):
        record = make_record(
            "Updating to version 1.",
            {"mapping_version": 1, "locator": "content://x/favorites", "favorite": 7, "_context": ""},
        )

        parsed = json.loads(_format_for_json(record, show_context=True))

        assert parsed["context"] == {"mapping_version": 1, "locator": "content://x/favorites"}
        assert parsed["extra"] == {"favorite": 7}

    def test_format_log_hides_context(self):
        record = make_record("x", {"mapping_version": 1})

        parsed = json.loads(_format_for_json(record, show_context=False))

        assert "context" not in parsed


class TestLoggingContextManagers:
    """Tests for logging context managers."""

    def test_migration_logging_context(self, captured):
        with migration_logging_context(1, "Relink dialer shortcuts"):
            logger.info("inside")
        logger.info("outside")

        assert captured[0]["extra"]["mapping_version"] == 1
        assert captured[0]["extra"]["migration"] == "Relink dialer shortcuts"
        assert "mapping_version" not in captured[1]["extra"]

    def test_nested_contexts(self, captured):
        with migration_logging_context(1, "step"):
            with locator_logging_context("content://a/favorites"):
                logger.info("scan")

        assert captured[0]["extra"]["mapping_version"] == 1
        assert captured[0]["extra"]["locator"] == "content://a/favorites"

    def test_get_logger_binds_module(self, captured):
        get_logger("mod").info("bound")

        assert captured[0]["extra"]["module"] == "mod"
