"""Logging configuration for the ``steamsun`` package logger."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO, log_file: str | None = None
) -> None:
    """Configure the ``steamsun`` logger.

    Args:
        level: Logging level (e.g. logging.DEBUG).
        log_file: Optional path; logs are also written there.
    """
    logger = logging.getLogger("steamsun")
    logger.setLevel(level)

    # Avoid duplicate handlers when called again (e.g. from tests).
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(
            log_file, mode="w", encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(
        "logging initialized at level %s", logging.getLevelName(level)
    )
