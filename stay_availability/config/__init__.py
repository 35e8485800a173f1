"""Configuration package."""

from stay_availability.config.logging import configure_logging, get_logger
from stay_availability.config.settings import Settings, settings

__all__ = ["settings", "Settings", "configure_logging", "get_logger"]
