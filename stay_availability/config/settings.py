"""Application settings and configuration management."""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AvailabilityAPISettings(BaseSettings):
    """Availability feed endpoint configuration."""

    base_url: str = "http://localhost:5000"
    request_timeout: int = 30
    max_retries: int = 3

    model_config = SettingsConfigDict(env_prefix="AVAILABILITY_API_")


class RefreshSettings(BaseSettings):
    """Availability refresh cadence."""

    interval_seconds: int = 120  # Refetch every 2 minutes
    stale_seconds: int = 30  # Cached data served without refetch inside this window

    model_config = SettingsConfigDict(env_prefix="REFRESH_")


class BookingSettings(BaseSettings):
    """Booking rules and inquiry channel configuration."""

    # False keeps a guest's checkout day blocked for the next arrival
    same_day_turnover: bool = False
    inquiry_phone: str = "971558166062"  # Without + and spaces
    inquiry_base_url: str = "https://wa.me"

    model_config = SettingsConfigDict(env_prefix="BOOKING_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Property served by this process (PROPERTY_ID / PROPERTY_NAME / MAX_GUESTS)
    property_id: Optional[int] = None
    property_name: str = ""
    max_guests: int = 2

    # Sub-settings
    availability_api: AvailabilityAPISettings = AvailabilityAPISettings()
    refresh: RefreshSettings = RefreshSettings()
    booking: BookingSettings = BookingSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_property(self) -> list[str]:
        """Validate required vars for serving a property. Returns list of missing var names."""
        missing = []
        if self.property_id is None:
            missing.append("PROPERTY_ID")
        if not self.property_name.strip():
            missing.append("PROPERTY_NAME")
        if self.max_guests < 1:
            missing.append("MAX_GUESTS")
        return missing


# Global settings instance
settings = Settings()
