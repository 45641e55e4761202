"""
Centralized logging configuration for the foodbook service.

All modules log through loggers obtained from `get_logger()`, so format and
handlers are defined in exactly one place.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configures the global logging system.

    - console output (stdout, Docker-compatible)
    - optional persistent log file
    - reduced verbosity for aiosqlite
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger for a given module, typically called with `__name__`.
    """
    return logging.getLogger(name)
