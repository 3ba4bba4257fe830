"""
Logging Configuration.
"""

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..levels import LogLevel


def _default_log_root() -> Optional[str]:
    """Legacy process-wide default, read once when settings are built."""
    return os.environ.get("LOGROOT") or None


class LoggingSettings(BaseSettings):
    """Facade construction options.

    Prefix: LOGROLL_
    """

    model_config = SettingsConfigDict(
        env_prefix="LOGROLL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    console: bool = Field(default=True, description="Enable the console sink")
    filename: Optional[str] = Field(default=None, description="strftime pattern path of the rotating file sink")
    raw_json: bool = Field(default=False, description="Write ND-JSON to the rotating file instead of text")
    symlink: Optional[str] = Field(default=None, description="Name of the 'latest' symlink inside log_root")
    log_root: Optional[str] = Field(
        default_factory=_default_log_root,
        description="Base directory for relative patterns; falls back to $LOGROOT",
    )

    console_level: LogLevel = Field(default=LogLevel.DEBUG, description="Minimum level of the console sink")
    file_level: LogLevel = Field(default=LogLevel.DEBUG, description="Minimum level of the file sink")
    colorize: Optional[bool] = Field(default=None, description="Force console colors; unset follows isatty")
    timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="strftime format of record timestamps")

    rotation_retry_attempts: int = Field(
        default=3, ge=0, description="Retries for a write rejected while its sink rotates"
    )
    rotation_retry_delay: float = Field(default=0.01, ge=0, description="Seconds between those retries")
    capture_stdlib: bool = Field(default=False, description="Redirect the stdlib root logger into the facade")
