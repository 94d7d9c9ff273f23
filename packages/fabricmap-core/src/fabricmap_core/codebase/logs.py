"""
Logging helpers for fabricmap.

Every module logs through a child of the ``fabricmap`` logger. Applications
that configure logging themselves need nothing from here; command line entry
points call ``configure_logger()`` so messages are visible by default.

Environment flags (all optional):

    FABRICMAP_LOG_LEVEL = "DEBUG" | "INFO" | "WARNING" | "ERROR"
        Default: "WARNING". Level used when configure_logger() gets no level.

    FABRICMAP_TRACE = "0" | "1"
        Default: "0". If "1", functions decorated with @trace log entry/exit.
"""

import logging
import os
from functools import wraps

ROOT_LOGGER_NAME = "fabricmap"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_trace_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.trace")


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the fabricmap namespace, e.g. get_logger("topology.builder")."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def env_log_level(default: int = logging.WARNING) -> int:
    val = os.getenv("FABRICMAP_LOG_LEVEL")
    if val is None:
        return default
    level = logging.getLevelName(str(val).strip().upper())
    return level if isinstance(level, int) else default


def configure_logger(level: int | None = None) -> logging.Logger:
    """
    Ensure the fabricmap logger has a handler in case the app didn't configure logging.
    Safe to call multiple times.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(env_log_level() if level is None else level)
    return logger


def trace_enabled() -> bool:
    val = os.getenv("FABRICMAP_TRACE", "0")
    return str(val).strip().lower() not in {"", "0", "false", "no"}


def trace(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if trace_enabled():
            _trace_logger.debug("Entering %s", func.__qualname__)
        result = func(*args, **kwargs)
        if trace_enabled():
            _trace_logger.debug("Exiting %s", func.__qualname__)
        return result

    return wrapper
