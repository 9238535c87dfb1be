"""
Schedule Settings for the Credit Builder plan engine.

Environment variables use the SCHEDULE_ prefix:
    SCHEDULE_MIN_TERM_MONTHS=1
    SCHEDULE_MAX_TERM_MONTHS=60

Usage:
    from credit_builder.service.schedule.settings import schedule_settings

    # Or create custom settings for testing
    custom = ScheduleSettings(max_term_months=24)
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScheduleSettings(BaseSettings):
    """
    Bounds applied to plan parameters.

    All monetary values are in minor currency units (cents).
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    min_term_months: int = Field(
        default=1,
        ge=1,
        description="Shortest allowed plan term",
    )
    max_term_months: int = Field(
        default=60,
        ge=1,
        description="Longest allowed plan term",
    )

    @model_validator(mode="after")
    def validate_term_bounds(self) -> "ScheduleSettings":
        if self.min_term_months > self.max_term_months:
            raise ValueError("min_term_months cannot exceed max_term_months")
        return self


@lru_cache
def get_schedule_settings() -> ScheduleSettings:
    return ScheduleSettings()


schedule_settings = get_schedule_settings()
