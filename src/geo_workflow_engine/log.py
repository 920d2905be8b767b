"""Logging setup - Rich console output plus an optional log file."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Marks handlers installed here so re-configuring replaces only ours
_HANDLER_FLAG = "_gwe_handler"


def configure_logging(config: LoggingConfig, console: Console | None = None) -> logging.Logger:
    """
    Configure the package logger from a LoggingConfig.

    Args:
        config: Logging section of the app config
        console: Rich console for console output (stderr by default)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("geo_workflow_engine")

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()

    if config.console_logging:
        rich_handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        setattr(rich_handler, _HANDLER_FLAG, True)
        logger.addHandler(rich_handler)

    if config.file_logging and config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        setattr(file_handler, _HANDLER_FLAG, True)
        logger.addHandler(file_handler)

    logger.setLevel(str(config.level).upper())
    return logger
