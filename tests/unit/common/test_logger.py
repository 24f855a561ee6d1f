"""Tests for logging setup."""

import logging
import logging.handlers
import uuid

import pytest

from keeper_formats.common.logger import get_logger, setup_logger


@pytest.fixture
def logger_name():
    """Unique logger name so tests do not share handlers."""
    name = f"test-{uuid.uuid4().hex}"
    yield name
    logger = logging.getLogger(name)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_console_only(self, logger_name):
        """Test default setup adds a console handler only."""
        logger = setup_logger(logger_name)

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_file_logging(self, logger_name, tmp_path):
        """Test rotating file handler is added."""
        logger = setup_logger(
            logger_name, log_dir=str(tmp_path / "logs"), file_logging=True, console_logging=False
        )
        logger.info("hello")

        assert isinstance(logger.handlers[0], logging.handlers.RotatingFileHandler)
        assert "hello" in (tmp_path / "logs" / f"{logger_name}.log").read_text()

    def test_no_duplicate_handlers(self, logger_name):
        """Test repeated setup does not stack handlers."""
        setup_logger(logger_name)
        logger = setup_logger(logger_name, level="debug")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_invalid_level(self, logger_name):
        """Test unknown levels are rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logger(logger_name, level="LOUD")

    def test_get_logger(self, logger_name):
        """Test get_logger returns the named logger."""
        assert get_logger(logger_name) is logging.getLogger(logger_name)
