"""Test the centralized logging functionality."""

import logging
from io import StringIO

import pytest

from gmwcs.logging import (
    DEFAULT_FORMAT,
    PACKAGE_LOGGER,
    configure_package_logger,
    disable_debug_logging,
    enable_debug_logging,
    get_logger,
    reset_logging,
    set_global_log_level,
)


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    reset_logging()
    configure_package_logger()


def test_centralized_logging():
    """Test that child loggers honour the package level."""
    logger = get_logger("gmwcs.test")

    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.addHandler(handler)

    # Info appears by default
    logger.info("Test info message")
    assert "Test info message" in log_capture.getvalue()

    # Debug does not
    log_capture.seek(0)
    log_capture.truncate(0)
    logger.debug("Test debug message")
    assert "Test debug message" not in log_capture.getvalue()

    enable_debug_logging()
    logger.debug("Test debug message after enable")
    assert "Test debug message after enable" in log_capture.getvalue()

    disable_debug_logging()
    logger.debug("Hidden again")
    assert "Hidden again" not in log_capture.getvalue()
    logger.removeHandler(handler)


def test_logger_naming():
    logger = get_logger("gmwcs.solver.test")
    assert logger.name == "gmwcs.solver.test"


def test_set_global_level():
    """Setting the global level affects the package logger and its children."""
    logger1 = get_logger("gmwcs.module1")
    logger2 = get_logger("gmwcs.module2")
    assert logger1 is not logger2

    set_global_log_level(logging.WARNING)
    root_logger = logging.getLogger(PACKAGE_LOGGER)
    assert root_logger.level == logging.WARNING
    assert logger1.getEffectiveLevel() == logging.WARNING
    assert logger2.getEffectiveLevel() == logging.WARNING


def test_setup_is_idempotent():
    configure_package_logger()
    configure_package_logger()
    assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1
    (handler,) = logging.getLogger(PACKAGE_LOGGER).handlers
    assert handler.formatter._fmt == DEFAULT_FORMAT


def test_reset_logging():
    reset_logging()
    root_logger = logging.getLogger(PACKAGE_LOGGER)
    assert root_logger.handlers == []
    assert root_logger.level == logging.NOTSET

    custom = logging.StreamHandler(StringIO())
    configure_package_logger(level=logging.ERROR, handler=custom)
    assert root_logger.handlers == [custom]
    assert root_logger.level == logging.ERROR


def test_solver_logs_summary(caplog, bowtie):
    from gmwcs import solve

    with caplog.at_level(logging.INFO, logger="gmwcs"):
        solve(bowtie)
    assert any("Best weight 8" in record.getMessage() for record in caplog.records)
