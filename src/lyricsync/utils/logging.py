"""Logging configuration for lyricsync."""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

PACKAGE_LOGGER = "lyricsync"

# HTTP and event-loop internals that are chatty at DEBUG
QUIET_LOGGERS = ("urllib3", "requests", "asyncio")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
# Provider fetches run in worker threads, so verbose output names the thread
VERBOSE_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> logging.Logger:
    """Configure the package logger; safe to call repeatedly."""
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))
    _reset_handlers(logger)

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else CONSOLE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
