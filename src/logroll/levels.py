"""
Syslog severity levels.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(str, Enum):
    """Syslog levels, most severe first."""

    EMERGENCY = "emergency"
    ALERT = "alert"
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"
    INFO = "info"
    DEBUG = "debug"

    @property
    def severity(self) -> int:
        """Syslog numeric severity (0 = emergency, 7 = debug)."""
        return _SEVERITY[self]

    def admits(self, level: LogLevel) -> bool:
        """Whether a sink with this minimum level accepts ``level``."""
        return level.severity <= self.severity

    @classmethod
    def from_stdlib(cls, levelno: int) -> LogLevel:
        """Map a stdlib ``logging`` level number onto the closest syslog level."""
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_SEVERITY = {level: index for index, level in enumerate(LogLevel)}
