"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and logging setup.
"""

import logging

from app.config import settings, Settings, ScheduleConfig
from app.exceptions import (
    ScheduleError,
    ServiceValidationError,
    NotFoundError,
    ConflictError,
    ConfigurationError,
)


def configure_logging(config: Settings = settings) -> None:
    """Apply the configured log level and format (root logger and package loggers)"""
    level = getattr(logging, config.log_level.upper())
    logging.basicConfig(level=level, format=config.log_format)
    logging.getLogger("feedingschedule").setLevel(level)


__all__ = [
    "settings",
    "Settings",
    "ScheduleConfig",
    "configure_logging",
    "ScheduleError",
    "ServiceValidationError",
    "NotFoundError",
    "ConflictError",
    "ConfigurationError",
]
