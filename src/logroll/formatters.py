"""
Record renderers: aligned console lines, plain text file lines and ND-JSON.
"""

from __future__ import annotations

from typing import Any, Mapping

import orjson

from .records import LogRecord

# =============================================================================
# Colors
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def orjson_dumps(v: Any, *, indent: bool = False) -> str:
    """Fast JSON serialization using orjson. Unknown types fall back to ``str``."""
    option = orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS
    if indent:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(v, default=str, option=option).decode()


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================


class ConsoleFormatter:
    """Human-readable console rendering: ``timestamp | LEVEL | message key=value``."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "NOTICE": "\x1b[34m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[1;31m",
        "ALERT": "\x1b[1;35m",
        "EMERGENCY": "\x1b[1;41m",
    }

    LEVEL_WIDTH = 9
    SEPARATOR = " | "

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            text = text[-width:]
        return f"{text:>{width}}"

    @classmethod
    def _colorize_level(cls, text: str, level_upper: str, use_color: bool) -> str:
        if not use_color:
            return text
        color = cls._LEVEL_COLORS.get(level_upper)
        if not color:
            return text
        return f"{color}{text}{cls._RESET}"

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(cls, record: LogRecord, *, use_color: bool = True) -> str:
        """Format a record into an aligned line; multi-line messages keep their breaks."""
        message_text = record.message

        extras = []
        for k, v in record.meta.items():
            key_colored = cls._maybe_color(str(k), "key", use_color)
            value_colored = cls._maybe_color(str(v), "dim", use_color)
            extras.append(f"{key_colored}={value_colored}")

        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        level_upper = record.level.value.upper()
        level_text = cls._colorize_level(cls._fit_right(level_upper, cls.LEVEL_WIDTH), level_upper, use_color)

        return "".join(
            [
                cls._maybe_color(record.timestamp, "timestamp", use_color),
                cls.SEPARATOR,
                level_text,
                cls.SEPARATOR,
                message_text,
            ]
        )


# =============================================================================
# File Formatters
# =============================================================================


def format_text(record: LogRecord) -> str:
    """``<timestamp> <level>: <message>`` plus an indented JSON meta block."""
    line = f"{record.timestamp} {record.level.value}: {record.message}\n"
    if record.meta:
        line += _meta_block(record.meta) + "\n"
    return line


def _meta_block(meta: Mapping[str, Any]) -> str:
    return orjson_dumps(dict(meta), indent=True)


def format_json(record: LogRecord) -> str:
    """One self-contained JSON object terminated by a newline."""
    payload: dict[str, Any] = {
        "timestamp": record.timestamp,
        "level": record.level.value,
        "message": record.message,
        "meta": dict(record.meta),
    }
    if record.trace_id:
        payload["trace_id"] = record.trace_id
    return orjson_dumps(payload) + "\n"
