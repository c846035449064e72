"""Logging configuration for the Debt Tracker API.

Console output always, plus an optional log file. The level comes from the
LOG_LEVEL setting (default INFO).
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level(level_name: Optional[str]) -> int:
    """Map a level name to a logging constant, falling back to INFO."""
    if not level_name:
        return logging.INFO
    return LOG_LEVEL_MAP.get(level_name.upper(), logging.INFO)


def setup_logging(level_name: Optional[str] = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level_name: Level name such as "DEBUG" or "WARNING"
        log_file: Optional path; when given, records are also written there
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    log_level = get_log_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicates on reload
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
