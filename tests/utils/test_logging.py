"""Tests for nicegrid logging helpers."""

from __future__ import annotations

import logging
import sys

import pytest

from nicegrid.utils.logging import LOGGER_NAME, configure_logging, get_logger, resolve_level


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    yield logger
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    for h in saved_handlers:
        logger.addHandler(h)
    logger.setLevel(saved_level)


def test_get_logger_defaults_to_package_logger() -> None:
    assert get_logger().name == LOGGER_NAME
    assert get_logger("nicegrid.grid.engine").name == "nicegrid.grid.engine"


def test_configure_logging_is_idempotent(clean_logger: logging.Logger) -> None:
    configure_logging(level="DEBUG", force=True)
    configure_logging(level="DEBUG")
    stderr_handlers = [
        h for h in clean_logger.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    assert len(stderr_handlers) == 1
    assert clean_logger.level == logging.DEBUG


def test_configure_logging_reads_env(monkeypatch: pytest.MonkeyPatch, clean_logger: logging.Logger) -> None:
    monkeypatch.setenv("NICEGRID_LOG_LEVEL", "WARNING")
    configure_logging(force=True)
    assert clean_logger.level == logging.WARNING


def test_resolve_level_names_numbers_and_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("not-a-level") == logging.INFO
    monkeypatch.delenv("NICEGRID_LOG_LEVEL", raising=False)
    assert resolve_level() == logging.INFO


def test_second_call_updates_console_level(clean_logger: logging.Logger) -> None:
    logger = configure_logging(level="DEBUG", force=True)
    assert logger is clean_logger
    configure_logging(level="ERROR")
    (console,) = [h for h in clean_logger.handlers if isinstance(h, logging.StreamHandler)]
    assert console.level == logging.ERROR
    assert clean_logger.level == logging.ERROR
