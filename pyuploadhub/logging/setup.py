"""
Logging setup for PyUploadHub.

Delayed logging initialization, so configuration can be loaded first
without a circular dependency.

Usage:
    from pyuploadhub.logging.setup import setup_logging, get_logger
    from pyuploadhub.config.settings import get_config_manager

    config_manager = get_config_manager()
    config_manager.load()
    setup_logging(config_manager.logging_config)

    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
from typing import Any
from pyuploadhub.logging.log_manager import LogManager


_logging_configured = False
_log_manager: LogManager | None = None


def setup_logging(logging_config: dict[str, Any]) -> None:
    """
    Initialize logging system with configuration.

    Args:
        logging_config: Dictionary with logging configuration
    """
    global _logging_configured, _log_manager

    if _logging_configured:
        logging.warning("Logging already configured, skipping re-initialization")
        return

    _log_manager = LogManager.get_instance(logging_config)
    _logging_configured = True

    logging.info("Logging system initialized successfully")


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    If logging hasn't been set up yet, this returns a basic logger
    that will work but won't have custom configuration.

    Args:
        name: Name for the logger (typically __name__)

    Returns:
        Logger instance
    """
    if _logging_configured and _log_manager is not None:
        return _log_manager.get_logger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def is_logging_configured() -> bool:
    """Check if setup_logging() has been called."""
    return _logging_configured


def reset_logging():
    """
    Reset logging configuration.

    This is mainly useful for testing.
    """
    global _logging_configured, _log_manager
    _logging_configured = False
    _log_manager = None
    LogManager.reset_instance()
