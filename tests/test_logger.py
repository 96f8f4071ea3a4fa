"""Tests for the structlog setup."""

import logging

from transition_harness.logging import get_logger, setup_logging
from transition_harness.logging.logger import DISABLE_CONSOLE_ENV


def test_console_logging_can_be_disabled(monkeypatch):
    monkeypatch.setenv(DISABLE_CONSOLE_ENV, "1")

    setup_logging(level="DEBUG")

    harness_logger = logging.getLogger("transition_harness")
    assert [type(handler) for handler in harness_logger.handlers] == [logging.NullHandler]
    assert harness_logger.level == logging.CRITICAL


def test_console_handler_uses_requested_level(monkeypatch):
    monkeypatch.delenv(DISABLE_CONSOLE_ENV, raising=False)

    setup_logging(level="warning", structured=True)

    harness_logger = logging.getLogger("transition_harness")
    assert isinstance(harness_logger.handlers[0], logging.StreamHandler)
    assert harness_logger.level == logging.WARNING

    monkeypatch.setenv(DISABLE_CONSOLE_ENV, "1")
    setup_logging()


def test_get_logger_binds_structured_fields():
    logger = get_logger("transition_harness.tests")

    bound = logger.bind(render=1)

    assert bound is not None
