"""
Logging Configuration Module
=============================

Centralized logging setup for the konstruo geometry core.

Usage:
    from konstruo.logging_config import get_logger

    logger = get_logger(__name__)
    logger.debug("Flattened %d segments", count)
    logger.warning("Ignoring out-of-plane coordinate: %s", z)

The core never prints.  Degraded-but-tolerated geometry (non-planar
control points, zero-length segments, arc length overshoot) is reported
through these loggers at WARNING or DEBUG level, and the host decides
where the records go.
"""

import logging
import sys
from typing import Optional

# Package-wide logger name prefix
LOGGER_PREFIX = "konstruo"

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
DETAILED_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s:%(lineno)d - %(message)s"

_initialized = False


def setup_logging(
    level: int = logging.WARNING,
    detailed: bool = False,
    stream: Optional[object] = None
) -> logging.Logger:
    """Initialize logging for the konstruo namespace.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        detailed: If True, use detailed format with timestamps and line numbers
        stream: Output stream (defaults to sys.stderr)

    Returns:
        Root logger for konstruo
    """
    global _initialized

    root_logger = logging.getLogger(LOGGER_PREFIX)

    if _initialized:
        root_logger.handlers.clear()

    root_logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT if detailed else DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # The host may have its own root handlers; avoid duplicate records
    root_logger.propagate = False

    _initialized = True

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Module names outside the package are nested under the ``konstruo``
    prefix, e.g. ``"flatten"`` becomes ``"konstruo.flatten"``.

    Unlike :func:`setup_logging` this installs no handler, so importing
    the library leaves the host's logging configuration untouched.
    """
    if not name.startswith(LOGGER_PREFIX):
        name = f"{LOGGER_PREFIX}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the logging level of the konstruo namespace at runtime."""
    root_logger = logging.getLogger(LOGGER_PREFIX)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug() -> None:
    """Enable DEBUG level logging."""
    set_log_level(logging.DEBUG)


def disable_debug() -> None:
    """Set logging back to WARNING level."""
    set_log_level(logging.WARNING)


__all__ = [
    "setup_logging",
    "get_logger",
    "set_log_level",
    "enable_debug",
    "disable_debug",
    "LOGGER_PREFIX",
]
