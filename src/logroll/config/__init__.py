"""
logroll Configuration Module.

Usage:
    from logroll.config import settings

    settings.logging.filename
    settings.logging.log_root
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LoggingSettings


class Settings(BaseSettings):
    """Composite settings; each sub-setting loads from its own env prefix."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "LoggingSettings",
]
