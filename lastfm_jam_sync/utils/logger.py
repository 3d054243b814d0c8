"""Logging configuration for Last.fm Jam Sync.

The CLI, the scheduler daemon and the webhook server all log through the
``lastfm_jam_sync`` logger: a rotating file at ``logging.path`` plus a colored
console stream. Components built without a logger use a child of it.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import coloredlogs

LOGGER_NAME = "lastfm_jam_sync"


def setup_logger(
    name: str = LOGGER_NAME,
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_size_mb: int = 10,
    backup_count: int = 5,
    console: bool = True
) -> logging.Logger:
    """Configure the sync logger from the ``logging`` settings section.

    Existing handlers are replaced, so calling this again (for example when
    ``serve`` starts after a CLI sync in the same process) does not duplicate
    output. Import and invalidation failures go out at ERROR, enrichment and
    cover fallbacks at WARNING.

    Args:
        name: Logger name
        log_file: Rotating log file (None keeps output on the console only)
        level: ``logging.level`` value
        max_size_mb: ``logging.max_size_mb``, size before rotation
        backup_count: ``logging.backup_count``, rotated files kept
        console: Whether to add the colored stdout handler

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    file_formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_formatter = coloredlogs.ColoredFormatter(
        fmt='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the package logger, or a child of it.

    Used as the fallback when a component is built without an explicit logger.
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
