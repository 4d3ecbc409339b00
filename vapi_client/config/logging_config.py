"""
Configure logging for the client library.

This module provides a consistent logging configuration across the entire
package, ensuring log messages are formatted correctly and directed
to the appropriate outputs (console, file, etc.).
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from vapi_client.config.constants import LOGGER_NAME

# Log levels
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log file configuration
LOG_DIR = Path("logs")
LOG_FILE = LOG_DIR / "vapi_client.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


def configure_logging(level: str = LOG_LEVEL, log_to_file: bool = True):
    """
    Configure the client logger with console and, optionally, file handlers.

    Args:
        level: Name of the log level (DEBUG, INFO, ...)
        log_to_file: Whether to also write to a rotating log file

    Returns:
        logging.Logger: The configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers if any
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            file_handler = RotatingFileHandler(
                LOG_FILE,
                maxBytes=MAX_LOG_SIZE,
                backupCount=BACKUP_COUNT
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not set up file logging: {e}")

    # Prevent log propagation to root logger
    logger.propagate = False

    logger.info("Logging configured")
    return logger
