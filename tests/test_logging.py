"""Tests for logging utilities."""

import logging
from io import StringIO

from simplexlab.logging import (
    configure_logging,
    get_logger,
    set_log_level,
)


def test_get_logger_returns_logger():
    """get_logger returns a logger inside the simplexlab namespace."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name.startswith("simplexlab.")


def test_get_logger_keeps_package_prefix():
    assert get_logger("simplexlab.lp.primal").name == "simplexlab.lp.primal"
    assert get_logger().name == "simplexlab"


def test_get_logger_caching():
    logger1 = get_logger("test_module")
    logger2 = get_logger("test_module")
    assert logger1 is logger2


def test_get_logger_different_modules():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def test_set_log_level():
    logger = get_logger("test_module")

    set_log_level(logging.INFO)
    assert logger.level <= logging.INFO

    set_log_level(logging.WARNING)
    assert logger.level <= logging.WARNING


def test_set_log_level_string():
    """set_log_level accepts level names."""
    logger = get_logger("test_module")

    set_log_level("DEBUG")
    assert logger.level == logging.DEBUG

    set_log_level("ERROR")
    assert logger.level == logging.ERROR

    set_log_level("WARNING")


def test_configure_logging():
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        logger = get_logger("test_module")
        logger.debug("Debug message")

        output = stream.getvalue()
        assert "Debug message" in output
        assert "[DEBUG] simplexlab.test_module" in output
    finally:
        configure_logging(level=logging.WARNING)


def test_solver_logs_pivots_at_debug_level(production_lp):
    """The primal simplex reports every pivot on its module logger."""
    from simplexlab.lp import simplex

    get_logger("lp.primal")
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        simplex(production_lp)
    finally:
        configure_logging(level=logging.WARNING)
    assert "simplexlab.lp.primal" in stream.getvalue()


def test_logger_does_not_propagate():
    logger = get_logger("test_module")
    assert logger.propagate is False


def test_multiple_loggers_independent():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")

    logger1.setLevel(logging.DEBUG)
    logger2.setLevel(logging.ERROR)

    assert logger1.level == logging.DEBUG
    assert logger2.level == logging.ERROR
