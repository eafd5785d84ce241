"""
Tests for settings loading, schedule configuration and error payloads.
"""

import logging
from datetime import time

import pytest
from pydantic import ValidationError

from app import configure_logging
from app.config import Environment, ScheduleConfig, Settings
from app.exceptions import (
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ScheduleError,
    ServiceValidationError,
)
from services import ScheduleService


# =============================================================================
# SETTINGS
# =============================================================================


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("SCHEDULE_GROUP_DAYS", raising=False)

    config = Settings(_env_file=None)

    assert config.app_name == "FeedingSchedule"
    assert config.is_development()
    assert config.schedule_config() == ScheduleConfig()


def test_settings_read_environment(monkeypatch):
    """
    Verifies:
    - Environment names are case-insensitive
    - schedule_* variables flow into the engine configuration
    """
    monkeypatch.setenv("ENVIRONMENT", "TESTING")
    monkeypatch.setenv("SCHEDULE_GROUP_DAYS", "4")
    monkeypatch.setenv("SCHEDULE_DECREMENT", "0.25")
    monkeypatch.setenv("SCHEDULE_DEFAULT_FEEDING_TIME", "07:30:00")
    monkeypatch.setenv("SCHEDULE_WEEK_START_DAY", "6")

    config = Settings(_env_file=None)
    schedule = config.schedule_config()

    assert config.environment == Environment.TESTING
    assert config.is_testing()
    assert not config.is_production()
    assert schedule.group_days == 4
    assert schedule.decrement == 0.25
    assert schedule.default_feeding_time == time(7, 30)
    assert schedule.week_start_day == 6


def test_service_from_settings(monkeypatch):
    monkeypatch.setenv("SCHEDULE_INITIAL_HORIZON_MONTHS", "1")

    svc = ScheduleService.from_settings(Settings(_env_file=None))

    assert svc.config.initial_horizon_months == 1
    assert svc.config.extension_horizon_months == 1


@pytest.mark.parametrize(
    "overrides",
    [{"group_days": 0}, {"decrement": -0.5}, {"week_start_day": 7}],
)
def test_schedule_config_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        ScheduleConfig(**overrides)


def test_schedule_config_is_frozen():
    config = ScheduleConfig()
    with pytest.raises(ValidationError):
        config.group_days = 5


# =============================================================================
# ERROR PAYLOADS
# =============================================================================


@pytest.mark.parametrize(
    "error_cls,status",
    [
        (ServiceValidationError, 400),
        (NotFoundError, 404),
        (ConflictError, 409),
        (ConfigurationError, 500),
    ],
)
def test_error_kinds_carry_http_status(error_cls, status):
    error = error_cls()

    assert isinstance(error, ScheduleError)
    assert error.http_status == status
    assert str(error) == error_cls.default_message


def test_error_to_dict_includes_optional_fields():
    error = NotFoundError(
        "Feeding block not found", details={"block_id": "abc"}, code="BLOCK_MISSING"
    )

    assert error.to_dict() == {
        "message": "Feeding block not found",
        "code": "BLOCK_MISSING",
        "details": {"block_id": "abc"},
    }
    assert ConflictError("Taken").to_dict() == {"message": "Taken"}


# =============================================================================
# LOGGING
# =============================================================================


def test_configure_logging_sets_package_level():
    """The configured level applies to every feedingschedule.* logger"""
    package_logger = logging.getLogger("feedingschedule")
    previous = package_logger.level
    try:
        configure_logging(Settings(_env_file=None, log_level="debug"))

        assert package_logger.level == logging.DEBUG
        assert logging.getLogger("feedingschedule.schedule").isEnabledFor(logging.DEBUG)

        configure_logging(Settings(_env_file=None, log_level="WARNING"))
        assert not logging.getLogger("feedingschedule.schedule").isEnabledFor(logging.INFO)
    finally:
        package_logger.setLevel(previous)
