# tests/test_log_setup.py
"""Tests for euctr.log_setup."""

import logging

import pytest

from euctr.log_setup import (
    ROOT_LOGGER_NAME,
    ColoredFormatter,
    LogContext,
    configure_logging,
    get_logger,
)


class TestGetLogger:
    def test_prefixes_foreign_names(self):
        assert get_logger("paginator").name == "euctr.paginator"

    def test_keeps_package_names(self):
        assert get_logger("euctr.writer").name == "euctr.writer"
        assert get_logger("euctr").name == "euctr"


class TestConfigureLogging:
    def test_console_only_by_default(self):
        log_file = configure_logging("DEBUG")
        root = logging.getLogger(ROOT_LOGGER_NAME)

        assert log_file is None
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)

    def test_reconfigure_replaces_handlers(self):
        configure_logging("INFO")
        configure_logging("WARNING")
        root = logging.getLogger(ROOT_LOGGER_NAME)

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_file_logging(self, tmp_path):
        log_file = configure_logging("INFO", log_dir=tmp_path / "logs", run_id="test",
                                     enable_console_logging=False)
        get_logger("orchestrator").info("hello from the crawler")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        assert log_file == tmp_path / "logs" / "euctr_test.log"
        text = log_file.read_text(encoding="utf-8")
        assert "hello from the crawler" in text
        assert "euctr.orchestrator" in text
        assert "\033[" not in text

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")


class TestLogContext:
    def test_success(self, caplog):
        logger = get_logger("test")
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            with LogContext(logger, "jurisdiction de"):
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Starting: jurisdiction de"
        assert messages[1].startswith("Completed: jurisdiction de (")

    def test_failure_is_logged_and_reraised(self, caplog):
        logger = get_logger("test")
        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "jurisdiction fr"):
                    raise RuntimeError("boom")

        failed = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(failed) == 1
        assert "Failed: jurisdiction fr" in failed[0].getMessage()
        assert "RuntimeError: boom" in failed[0].getMessage()
