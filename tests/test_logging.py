"""Tests for logging setup."""

import logging

from pyuploadhub.logging.log_manager import LogManager
from pyuploadhub.logging.setup import get_logger, is_logging_configured, reset_logging, setup_logging


def test_get_logger_before_setup_has_handler():
    logger = get_logger("pyuploadhub.tests.early")

    assert not is_logging_configured()
    assert logger.handlers


def test_setup_logging_applies_dict_config():
    setup_logging({
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {"pyuploadhub.tests.configured": {"level": "DEBUG"}},
        "root": {"level": "WARNING"},
    })

    assert is_logging_configured()
    assert get_logger("pyuploadhub.tests.configured").level == logging.DEBUG


def test_setup_logging_only_once():
    setup_logging({"root": {"level": "INFO"}})
    first = LogManager.get_instance()

    setup_logging({"root": {"level": "DEBUG"}})

    assert LogManager.get_instance() is first


def test_empty_config_leaves_logging_alone():
    manager = LogManager({})
    assert manager.logger_settings == {}


def test_reset_logging():
    setup_logging({})
    reset_logging()
    assert not is_logging_configured()
