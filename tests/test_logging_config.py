"""Tests for logging setup."""

import logging

import pytest

from ledgerkit.logging_config import configure_logging, reset_logging


def test_defaults_to_warning(monkeypatch):
    monkeypatch.delenv("LEDGERKIT_LOG_LEVEL", raising=False)

    logger = configure_logging()

    assert logger.name == "ledgerkit"
    assert logger.level == logging.WARNING


def test_environment_level(monkeypatch):
    monkeypatch.setenv("LEDGERKIT_LOG_LEVEL", "debug")
    assert configure_logging().level == logging.DEBUG


def test_explicit_level_wins_and_handler_is_installed_once(monkeypatch):
    monkeypatch.setenv("LEDGERKIT_LOG_LEVEL", "DEBUG")

    configure_logging("error")
    logger = configure_logging("info")

    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    reset_logging()
    assert logger.handlers == []


def test_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("LOUD")
