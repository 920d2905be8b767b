"""Tests for logging setup."""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from geo_workflow_engine.config import LoggingConfig
from geo_workflow_engine.log import configure_logging


@pytest.fixture
def package_logger():
    """Package logger, restored after the test."""
    logger = logging.getLogger("geo_workflow_engine")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_handler(self, package_logger):
        buffer = io.StringIO()
        logger = configure_logging(LoggingConfig(level="debug"), console=Console(file=buffer, width=120))

        assert logger is package_logger
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in logger.handlers)

        logging.getLogger("geo_workflow_engine.runners").info("hello from the runner")
        assert "hello from the runner" in buffer.getvalue()

    def test_reconfigure_replaces_handlers(self, package_logger):
        configure_logging(LoggingConfig())
        configure_logging(LoggingConfig())

        assert sum(isinstance(h, RichHandler) for h in package_logger.handlers) == 1

    def test_file_logging(self, package_logger, tmp_path):
        log_file = tmp_path / "logs" / "gwe.log"
        config = LoggingConfig(level="INFO", file_logging=True, console_logging=False, log_file=log_file)

        configure_logging(config)
        logging.getLogger("geo_workflow_engine.store").warning("store warning")
        for handler in package_logger.handlers:
            handler.flush()

        assert not any(isinstance(h, RichHandler) for h in package_logger.handlers)
        assert "WARNING" in log_file.read_text()
        assert "store warning" in log_file.read_text()
