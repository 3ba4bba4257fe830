"""
Process-level error channel.

logroll cannot log its own failures through the sinks that are failing, so
they are reported on stderr through a dedicated structlog logger. structlog is
not configured globally; applications keep control of their own setup.
"""

from __future__ import annotations

import sys
from typing import Any, Callable

import structlog

from .exceptions import Degradation, LogrollError

ErrorChannel = Callable[[LogrollError], None]


def get_logger(name: str = "logroll", stream: Any = None) -> Any:
    """Get a structlog logger writing key/value lines to ``stream`` (stderr)."""
    return structlog.wrap_logger(
        structlog.PrintLogger(file=stream or sys.stderr),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "component", "event"],
                drop_missing=True,
            ),
        ],
        component=name,
    )


_logger = get_logger()


def report_error(exc: LogrollError) -> None:
    """Default error channel: degradations at warning, the rest at error."""
    log = _logger.warning if isinstance(exc, Degradation) else _logger.error
    log(str(exc), code=exc.code, **exc.details)
