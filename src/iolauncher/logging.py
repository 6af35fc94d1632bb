"""Structured logging configuration for iolauncher.

Provides dual output strategy:
- console.print() for user-facing messages (Rich formatting)
- logging module for debugging (commands run, exit codes)

Usage:
    from iolauncher.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("Docker command: %s", cmd)

Enable verbose logging via:
    - CLI flag: iolauncher --debug
    - Environment: IOLAUNCH_DEBUG=1
"""

from __future__ import annotations

import logging
import os
import sys

_initialized = False

ROOT_LOGGER = "iolauncher"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_log_level() -> int:
    """Determine log level from environment."""
    if os.environ.get("IOLAUNCH_DEBUG", "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _init_logging() -> None:
    """Initialize logging configuration (called once)."""
    global _initialized
    if _initialized:
        return

    level = _get_log_level()
    is_debug = level == logging.DEBUG

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)

    # Only add handler if none exist (avoid duplicate handlers)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(LOG_FORMAT_DEBUG if is_debug else LOG_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(handler)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__).

    Returns:
        Configured logger in the iolauncher namespace.
    """
    _init_logging()

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def set_debug(enabled: bool = True) -> None:
    """Enable or disable debug logging.

    Called by CLI when --debug flag is used.
    """
    level = logging.DEBUG if enabled else logging.WARNING
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)

    fmt = LOG_FORMAT_DEBUG if enabled else LOG_FORMAT
    for handler in root_logger.handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
