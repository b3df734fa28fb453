"""Unit tests for logging helpers."""

import logging

from src.utils.logger import ROOT_LOGGER_NAME, LoggerMixin, get_logger, log_processing_stats


class Worker(LoggerMixin):
    pass


class TestLogger:
    """Test logger naming and stats output."""

    def test_child_of_root_logger(self):
        assert get_logger("chat").name == f"{ROOT_LOGGER_NAME}.chat"

    def test_full_name_not_prefixed_twice(self):
        assert get_logger(f"{ROOT_LOGGER_NAME}.x").name == f"{ROOT_LOGGER_NAME}.x"

    def test_same_logger_returned(self):
        assert get_logger("chat") is get_logger("chat")

    def test_mixin_uses_class_name(self):
        assert Worker().logger.name == f"{ROOT_LOGGER_NAME}.Worker"

    def test_processing_stats(self, caplog):
        logger = logging.getLogger("stats-test")
        with caplog.at_level(logging.INFO, logger="stats-test"):
            log_processing_stats(logger, "Reply stream", 10, 2.0, {"model": "m"})

        assert "Reply stream completed: 10 items in 2.00s (5.00 items/sec) [model=m]" in caplog.text
