"""
Logging Configuration
Sets up the package logger for ibox.

stdout carries the captured answers and stderr carries the box itself, so
log records only ever go to a file.
"""
import logging
from typing import Optional


def setup_logging(level: int = logging.DEBUG, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'ibox' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to write logs to. Without it, records are dropped.
    """
    logger = logging.getLogger("ibox")
    logger.setLevel(level)
    logger.propagate = False

    # Avoid duplicate handlers when called twice (env var, then --log-file)
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    if not log_file:
        logger.addHandler(logging.NullHandler())
        return

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.info("Logging initialized.")
