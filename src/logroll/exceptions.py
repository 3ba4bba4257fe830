"""
Unified exception hierarchy for logroll.

Failures are split into two branches:

- ``SinkError``: a sink could not accept a record. Isolated per sink by the
  dispatcher, reported through the error channel, never raised to callers.
- ``Degradation``: something non-essential went wrong (symlink pointer,
  stack trimming). The record is still delivered.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogrollError(Exception):
    """Base class for every error raised inside logroll."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# =============================================================================
# Sink Errors
# =============================================================================


class SinkError(LogrollError):
    """A sink failed to accept a record."""

    pass


class RotationFailed(SinkError):
    """Directory creation or opening the new log file failed.

    The sink keeps its previous state; the next write retries the rotation.
    """

    def __init__(self, *, path: str, reason: str) -> None:
        super().__init__(
            f"Rotation to '{path}' failed: {reason}",
            code="ROTATION_FAILED",
            details={"path": path, "reason": reason},
        )


class RotationInProgress(SinkError):
    """A write arrived while the sink was rotating."""

    def __init__(self, *, path: Optional[str]) -> None:
        super().__init__(
            f"Rotation in progress for '{path}'",
            code="ROTATION_IN_PROGRESS",
            details={"path": path},
        )


class SinkWriteFailed(SinkError):
    """Appending a rendered record failed."""

    def __init__(self, *, sink: str, reason: str, details: Optional[Dict[str, Any]] = None) -> None:
        merged = {"sink": sink, "reason": reason}
        merged.update(details or {})
        super().__init__(f"Write to {sink} failed: {reason}", code="SINK_WRITE_FAILED", details=merged)


# =============================================================================
# Degradations (non-fatal)
# =============================================================================


class Degradation(LogrollError):
    """Non-fatal problem; logging continues."""

    pass


class SymlinkUpdateFailed(Degradation):
    def __init__(self, *, link: str, target: str, reason: str) -> None:
        super().__init__(
            f"Could not point '{link}' at '{target}': {reason}",
            code="SYMLINK_UPDATE_FAILED",
            details={"link": link, "target": target, "reason": reason},
        )


class StackCaptureDegraded(Degradation):
    """Fewer internal frames than expected were found while trimming a stack."""

    def __init__(self, *, trace_id: str, expected: int, skipped: int) -> None:
        super().__init__(
            f"Trace {trace_id}: expected {expected} internal frames, found {skipped}",
            code="STACK_CAPTURE_DEGRADED",
            details={"trace_id": trace_id, "expected": expected, "skipped": skipped},
        )
