"""
Immutable value types passed between the facade, the dispatcher and sinks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Mapping, Optional

from .levels import LogLevel

SinkKind = Literal["console", "rotating_file"]


@dataclass(frozen=True)
class LogRecord:
    """A single log line as seen by sinks.

    ``timestamp`` is already rendered; ``created`` is the submission time and
    drives file path resolution.
    """

    message: str
    level: LogLevel
    timestamp: str
    created: datetime
    meta: Mapping[str, Any] = field(default_factory=dict)
    trace_id: Optional[str] = None
    stack_text: Optional[str] = None


@dataclass(frozen=True)
class TraceEnvelope:
    """Correlation id, decorated message and caller stack for one call."""

    id: str
    decorated_message: str
    stack_text: str
    degraded: bool = False
    skipped_frames: int = 0


@dataclass(frozen=True)
class SinkConfig:
    colorize: Optional[bool] = None
    json_output: bool = False
    symlink: Optional[str] = None
    log_root: Optional[str] = None
