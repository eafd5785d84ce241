"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.

Schedule tunables (elimination group length, decrement, materialization
horizons) are collected into an explicit ScheduleConfig that is handed to
the schedule service at construction time.
"""

from datetime import time
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class ScheduleConfig(BaseModel):
    """Tunables for the feeding schedule engine."""

    model_config = ConfigDict(frozen=True)

    group_days: int = Field(
        default=3, ge=1, description="Days per elimination group"
    )
    decrement: float = Field(
        default=0.5, ge=0, description="Ounces removed per elimination group"
    )
    initial_horizon_months: int = Field(
        default=3, ge=0, description="Months materialized when a block is created"
    )
    extension_horizon_months: int = Field(
        default=1, ge=1, description="Months materialized by an explicit extension"
    )
    default_feeding_time: time = Field(
        default=time(12, 0),
        description="Local time-of-day used when no earlier entry gives a pattern",
    )
    week_start_day: int = Field(
        default=0, ge=0, le=6, description="First day of the week (0=Monday)"
    )


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="FeedingSchedule", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Database settings - PostgreSQL
    postgres_db_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/feeding_schedule",
        description="PostgreSQL connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # Feeding schedule
    schedule_group_days: int = Field(
        default=3, ge=1, description="Days per elimination group"
    )
    schedule_decrement: float = Field(
        default=0.5, ge=0, description="Ounces removed per elimination group"
    )
    schedule_initial_horizon_months: int = Field(
        default=3, ge=0, description="Months of entries created with a new block"
    )
    schedule_extension_horizon_months: int = Field(
        default=1, ge=1, description="Months of entries created per extension"
    )
    schedule_default_feeding_time: time = Field(
        default=time(12, 0), description="Fallback local feeding time"
    )
    schedule_week_start_day: int = Field(
        default=0, ge=0, le=6, description="First day of the week (0=Monday)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING

    def schedule_config(self) -> ScheduleConfig:
        """Build the engine configuration from the schedule_* settings"""
        return ScheduleConfig(
            group_days=self.schedule_group_days,
            decrement=self.schedule_decrement,
            initial_horizon_months=self.schedule_initial_horizon_months,
            extension_horizon_months=self.schedule_extension_horizon_months,
            default_feeding_time=self.schedule_default_feeding_time,
            week_start_day=self.schedule_week_start_day,
        )


# Global settings instance
settings = Settings()
