"""Package-wide logging for gmwcs.

Every module obtains its logger through `get_logger(__name__)`, so all
records flow into the single ``"gmwcs"`` package logger configured here. Solver
modules log decomposition and model sizes at DEBUG and solve summaries at INFO.
"""

import logging
import sys
from typing import Optional

#: Name of the logger every gmwcs module logger descends from.
PACKAGE_LOGGER = "gmwcs"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def configure_package_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach one handler to the package logger.

    Repeated calls are ignored until `reset_logging` is called, so importing
    many modules never stacks handlers.

    Args:
        level: Level of the package logger.
        format_string: Record format; `DEFAULT_FORMAT` if omitted.
        handler: Destination; a stdout stream handler if omitted.
    """
    global _configured
    if _configured:
        return

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = handler if handler is not None else logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)
    # Records still reach the root logger, where pytest's caplog listens
    package_logger.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for module ``name`` under the package logger."""
    configure_package_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the package logger and its handlers."""
    configure_package_logger()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Show model sizes, cut counts and per-solve timings."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler so the next call configures it afresh."""
    global _configured
    _configured = False
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


configure_package_logger()
