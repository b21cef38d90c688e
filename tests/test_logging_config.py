"""Logging setup tests."""

import logging

import pytest

from app.core.config import Settings
from app.core.logging_config import BACKEND_LOGGER, level_from, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    backend = logging.getLogger(BACKEND_LOGGER)
    saved = (root.level, root.handlers[:], backend.level, backend.handlers[:])
    yield
    for logger in (root, backend):
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
    root.setLevel(saved[0])
    root.handlers.extend(saved[1])
    backend.setLevel(saved[2])
    backend.handlers.extend(saved[3])


class TestLevelFrom:

    def test_names_are_case_insensitive(self):
        assert level_from("warning", logging.INFO) == logging.WARNING

    def test_unknown_or_empty_uses_default(self):
        assert level_from("chatty", logging.INFO) == logging.INFO
        assert level_from(None, logging.ERROR) == logging.ERROR


class TestSetupLogging:

    def test_settings_drive_levels_and_files(self, tmp_path, restore_logging):
        setup_logging(Settings(LOG_LEVEL="warning", BACKEND_LOG_LEVEL="debug", LOG_DIR=str(tmp_path / "logs")))

        backend = logging.getLogger(BACKEND_LOGGER)
        assert backend.level == logging.DEBUG
        assert logging.getLogger().handlers[0].level == logging.WARNING
        backend.debug("trying /api/stock-ins/get")
        for handler in backend.handlers:
            handler.flush()

        assert "trying /api/stock-ins/get" in (tmp_path / "logs" / "backend.log").read_text()
        assert (tmp_path / "logs" / "portal.log").exists()
        assert (tmp_path / "logs" / "errors.log").exists()

    def test_backend_level_follows_root_by_default(self, restore_logging):
        setup_logging(Settings(LOG_LEVEL="ERROR", LOG_DIR=""))

        assert logging.getLogger(BACKEND_LOGGER).level == logging.ERROR
        assert logging.getLogger(BACKEND_LOGGER).handlers == []

    def test_invalid_level_is_rejected(self):
        with pytest.raises(ValueError):
            Settings(LOG_LEVEL="chatty")
