"""Project-wide logger."""
import logging
import os
import sys

LOGGER_NAME = "calculator_history"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_logger() -> logging.Logger:
    """
    Create the project logger with a single stream handler.

    The level is read once from the ``LOG_LEVEL`` environment variable (default ``INFO``).

    :return: Configured logger
    :rtype: logging.Logger
    """
    project_logger = logging.getLogger(LOGGER_NAME)
    if not project_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        project_logger.addHandler(handler)
    project_logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    return project_logger


logger: logging.Logger = _build_logger()
