from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache

from dateutil import tz
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(
        default="eventcal",
        validation_alias=AliasChoices("EVENTCAL_APP_NAME", "APP_NAME"),
    )
    app_host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("EVENTCAL_APP_HOST", "APP_HOST"),
    )
    app_port: int = Field(
        default=7140,
        validation_alias=AliasChoices("EVENTCAL_APP_PORT", "APP_PORT"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("EVENTCAL_LOG_LEVEL", "LOG_LEVEL"),
    )
    calendar_timezone: str = Field(
        default="UTC",
        validation_alias=AliasChoices("EVENTCAL_TIMEZONE", "CALENDAR_TIMEZONE"),
    )
    export_indent: int = Field(
        default=2,
        validation_alias=AliasChoices("EVENTCAL_EXPORT_INDENT", "EXPORT_INDENT"),
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    def resolve_timezone(self) -> tzinfo:
        """Return the calendar zone used to split instants into calendar days.

        ``local`` selects the host zone; anything else must be an IANA name.
        """
        if self.calendar_timezone.lower() == "local":
            return tz.tzlocal()
        zone = tz.gettz(self.calendar_timezone)
        if zone is None:
            raise ValueError(f"Unknown calendar timezone: {self.calendar_timezone}")
        return zone


@lru_cache
def get_settings() -> Settings:
    return Settings()
