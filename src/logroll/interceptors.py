"""
Interceptors for capturing standard library logs.
"""

from __future__ import annotations

import logging

from .facade import LogFacade
from .levels import LogLevel

_FORMATTER = logging.Formatter()


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging records into a LogFacade.
    Third-party libraries logging through ``logging`` end up in the same
    sinks as application records.
    """

    def __init__(self, facade: LogFacade, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._facade = facade

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Skip logroll's own diagnostics to avoid loops
            if record.name.startswith("logroll"):
                return

            meta = {"logger": record.name}
            if record.exc_info:
                meta["exception"] = _FORMATTER.formatException(record.exc_info)
            elif record.exc_text:
                meta["exception"] = record.exc_text

            self._facade.emit(LogLevel.from_stdlib(record.levelno), record.getMessage(), meta)
        except Exception:
            self.handleError(record)


def intercept_stdlib(facade: LogFacade, level: int = logging.DEBUG) -> RedirectStdLibHandler:
    """Replace the root logger's handlers with a RedirectStdLibHandler."""
    handler = RedirectStdLibHandler(facade)
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return handler
