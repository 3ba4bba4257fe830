"""
Log sink abstraction and the console sink.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Any, Optional

from .exceptions import SinkWriteFailed
from .formatters import ConsoleFormatter, format_json
from .records import LogRecord

# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """A destination for log records.

    ``write`` must either append the whole record or raise a ``SinkError``;
    partial records are never left behind.
    """

    name = "sink"

    @abstractmethod
    async def write(self, record: LogRecord) -> None:
        """Write one record to the sink."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the sink and release resources."""
        ...


class ConsoleSink(BaseSink):
    """Console sink with colored aligned output or ND-JSON.

    Args:
        stream: Output stream (default: stdout)
        colorize: Force ANSI colors on or off; ``None`` follows ``isatty``
        json_output: Emit one JSON object per line instead of aligned text
    """

    name = "console"

    def __init__(self, stream: Any = None, *, colorize: Optional[bool] = None, json_output: bool = False):
        self._stream = stream or sys.stdout
        self._colorize = colorize
        self._json_output = json_output

    @property
    def use_color(self) -> bool:
        if self._colorize is not None:
            return self._colorize
        return bool(getattr(self._stream, "isatty", lambda: False)())

    async def write(self, record: LogRecord) -> None:
        if self._json_output:
            output = format_json(record)
        else:
            output = ConsoleFormatter.format(record, use_color=self.use_color) + "\n"

        try:
            self._stream.write(output)
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise SinkWriteFailed(sink=self.name, reason=str(exc)) from exc

    async def close(self) -> None:
        try:
            self._stream.flush()
        except (OSError, ValueError):
            pass
