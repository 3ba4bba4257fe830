"""
Correlation ids and caller stack capture for diagnostic records.

Frames that belong to logroll's own call path are recognised by identity of
their code objects, registered with :func:`internal_frame`. Renaming a method
does not break trimming, and an unknown frame is never removed.
"""

from __future__ import annotations

import inspect
import traceback
import uuid
from types import FrameType
from typing import Callable, Optional, Set, TypeVar

from .records import TraceEnvelope

F = TypeVar("F", bound=Callable)

_INTERNAL_CODES: Set[object] = set()


def internal_frame(func: F) -> F:
    """Mark ``func`` as part of the logging call path so traces skip its frame."""
    _INTERNAL_CODES.add(func.__code__)
    return func


def is_internal(frame: FrameType) -> bool:
    return frame.f_code in _INTERNAL_CODES


class TraceAnnotator:
    """Builds a TraceEnvelope for a message.

    Args:
        limit: Maximum number of caller frames kept in the stack text
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        self._limit = limit

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def annotate(self, message: str, expected_internal: int = 0) -> TraceEnvelope:
        """Decorate ``message`` with a fresh trace id and capture the caller stack.

        Args:
            message: Message to decorate.
            expected_internal: Number of internal frames the caller knows sit
                between it and user code. Finding fewer marks the envelope as
                degraded; the stack is never trimmed past a non-internal frame.
        """
        trace_id = self.new_id()
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        del frame

        skipped = 0
        while caller is not None and is_internal(caller):
            caller = caller.f_back
            skipped += 1

        stack_text = trace_id
        if caller is not None:
            summary = traceback.StackSummary.extract(traceback.walk_stack(caller), limit=self._limit)
            summary.reverse()
            stack_text += "\n" + "".join(summary.format()).rstrip("\n")
        del caller

        return TraceEnvelope(
            id=trace_id,
            decorated_message=f"{message} | trace: {trace_id}",
            stack_text=stack_text,
            degraded=skipped < expected_internal,
            skipped_frames=skipped,
        )
