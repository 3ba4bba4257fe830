"""
logroll: leveled logging with time-pattern file rotation and stack traces.

Provides a facade with one method per syslog level and multiple sinks:
- console: aligned, optionally colored lines (or ND-JSON)
- rotating file: strftime-patterned path, rolled over when the resolved
  path changes, with an optional "latest" symlink

``error``, ``debug`` and ``critical`` tag the message with a trace id and
follow it with the caller's stack at ``debug`` level.

Library: structlog for internal diagnostics, orjson for JSON lines,
pydantic-settings for configuration.
"""

from .core import configure_logging, get_logger, shutdown_logging
from .facade import Extension, LogFacade, LoggerCapability
from .levels import LogLevel

__all__ = [
    "configure_logging",
    "get_logger",
    "shutdown_logging",
    "Extension",
    "LogFacade",
    "LoggerCapability",
    "LogLevel",
]
