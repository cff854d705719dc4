"""
Logging Configuration
=====================
Sets up the logger for the 'appmodel' namespace.

What the package logs:
    DEBUG: every committed change batch, cancelled writes, rejected
        validations.
    INFO: finished sync operations (load, save, delete).
    WARNING: responses that could not be parsed, failed syncs, batches cut
        short by a raising change subscriber.

Nothing is printed until the embedding application calls `setup_logging()`
(or configures the 'appmodel' logger itself).
"""
import logging
import sys
from typing import Optional

from appmodel.config import LOGGER_NAME


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the package logger for the 'appmodel' namespace.

    Models only log through module loggers; applications embedding them call
    this once at startup to see the output.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Calling twice must not duplicate every record
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
