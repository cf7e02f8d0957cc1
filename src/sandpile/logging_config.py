"""
Logging configuration for the "sandpile" namespace.

Library modules only create loggers; scripts and demos call
setup_logging() once to attach handlers.
"""

from __future__ import annotations
import logging
import sys

LOGGER_NAME = "sandpile"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Configure the package logger with a stdout handler.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write logs to

    Returns:
        The configured "sandpile" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate output when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
