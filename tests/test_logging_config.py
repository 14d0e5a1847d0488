"""Tests for the logging setup."""

import logging

from rolloff_api.app.core.logging_config import setup_logging


def _flush_root():
    for handler in logging.getLogger().handlers:
        handler.flush()


def test_app_and_server_logs_share_the_log_file(tmp_path):
    logfile = tmp_path / "rolloff.log"
    setup_logging("DEBUG", str(logfile), force=True)
    try:
        logging.getLogger("rolloff_api.tests").debug("container %s", "CNT-001")
        logging.getLogger("uvicorn.error").info("Application startup complete.")
        _flush_root()

        text = logfile.read_text(encoding="utf-8")
        assert "[DEBUG] rolloff_api.tests: container CNT-001" in text
        assert "[INFO] uvicorn.error: Application startup complete." in text
        assert logging.getLogger("uvicorn.access").handlers == []
    finally:
        setup_logging("INFO", force=True)


def test_second_call_without_force_is_ignored(tmp_path):
    setup_logging("INFO", force=True)
    handlers_before = list(logging.getLogger().handlers)

    setup_logging("DEBUG", str(tmp_path / "ignored.log"))

    assert logging.getLogger().handlers == handlers_before
    assert not (tmp_path / "ignored.log").exists()
