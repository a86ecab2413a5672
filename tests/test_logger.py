"""
Unit tests for logger setup.
"""
import logging

from core.logger import resolve_level, set_level, setup_logger


def test_level_from_argument():
    assert setup_logger("tests.explicit", "debug").level == logging.DEBUG


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    assert setup_logger("tests.env").level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    assert resolve_level("LOUD") == logging.INFO


def test_single_handler_per_logger():
    first = setup_logger("tests.handlers")
    second = setup_logger("tests.handlers")

    assert first is second
    assert len(second.handlers) == 1


def test_set_level_applies_to_existing_loggers():
    logger = setup_logger("tests.runtime", "INFO")

    set_level("ERROR")
    try:
        assert logger.level == logging.ERROR
    finally:
        set_level("INFO")


def test_records_reach_root_handlers(caplog):
    logger = setup_logger("tests.propagation", "INFO")

    with caplog.at_level(logging.INFO):
        logger.info("row summary")

    assert "row summary" in caplog.text
