"""
Time-pattern driven file rotation.

The active file name is a strftime pattern (``app-%Y-%m-%d.log``). Every write
resolves the pattern against the record's submission time; when the result
differs from the file currently open, the sink rolls over to the new path.
Rotation cadence is therefore exactly as fine as the tokens in the pattern:
a date-only pattern rotates daily, adding ``%H`` rotates hourly.

Rotation steps (directory creation, symlink update, open) run off the event
loop through ``asyncio.to_thread``. While they are in flight the sink rejects
writes with ``RotationInProgress`` instead of racing the swap.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from datetime import datetime
from typing import IO, Callable, Optional

from .diagnostics import ErrorChannel, report_error
from .exceptions import RotationFailed, RotationInProgress, SinkWriteFailed, SymlinkUpdateFailed
from .formatters import format_json, format_text
from .records import LogRecord
from .sinks import BaseSink


class RotationPolicy:
    """Pure functions deciding which file a record belongs to."""

    @staticmethod
    def resolve(pattern_path: str, now: datetime, log_root: Optional[str] = None) -> str:
        """Substitute strftime tokens in ``pattern_path`` using ``now``.

        Relative patterns are joined onto ``log_root`` first (when given). The
        root goes through strftime as well, so a literal ``%`` in it must be
        written as ``%%``.
        """
        path = pattern_path
        if not os.path.isabs(path) and log_root:
            path = os.path.join(log_root, path)
        return now.strftime(path)

    @staticmethod
    def is_rotation_due(previous: Optional[str], new: str) -> bool:
        return previous is None or previous != new


@dataclass
class RotationState:
    """Mutable state owned by a single RotatingFileSink."""

    pattern_path: str
    log_root: Optional[str] = None
    symlink_name: Optional[str] = None
    current_resolved_path: Optional[str] = None
    is_rotating: bool = False
    handle: Optional[IO[str]] = None


class RotatingFileSink(BaseSink):
    """File sink that rolls over whenever the resolved pattern path changes.

    Args:
        pattern_path: strftime pattern; relative patterns live under ``log_root``
        log_root: Base directory for relative patterns and the symlink
        symlink: Name of a "latest" symlink maintained inside ``log_root``
        json_output: Write ND-JSON instead of text lines
        error_channel: Receives non-fatal problems (symlink updates)
    """

    name = "rotating_file"

    def __init__(
        self,
        pattern_path: str,
        *,
        log_root: Optional[str] = None,
        symlink: Optional[str] = None,
        json_output: bool = False,
        encoding: str = "utf-8",
        error_channel: ErrorChannel = report_error,
        policy: RotationPolicy | None = None,
    ):
        self._state = RotationState(pattern_path=pattern_path, log_root=log_root, symlink_name=symlink)
        self._policy = policy or RotationPolicy()
        self._render: Callable[[LogRecord], str] = format_json if json_output else format_text
        self._encoding = encoding
        self._error_channel = error_channel
        self._write_lock = asyncio.Lock()
        self.open_count = 0
        self.rotation_count = 0

    # ---------------------------------------------------------------------- #
    # Read-only views
    # ---------------------------------------------------------------------- #

    @property
    def current_path(self) -> Optional[str]:
        return self._state.current_resolved_path

    @property
    def is_rotating(self) -> bool:
        return self._state.is_rotating

    @property
    def symlink_path(self) -> Optional[str]:
        if not self._state.symlink_name:
            return None
        return os.path.join(self._state.log_root or "", self._state.symlink_name)

    # ---------------------------------------------------------------------- #
    # Sink interface
    # ---------------------------------------------------------------------- #

    async def write(self, record: LogRecord) -> None:
        state = self._state
        new_path = self._policy.resolve(state.pattern_path, record.created, state.log_root)

        if state.is_rotating:
            raise RotationInProgress(path=state.current_resolved_path)

        if self._policy.is_rotation_due(state.current_resolved_path, new_path):
            await self._rotate(new_path)

        data = self._render(record)
        async with self._write_lock:
            handle = state.handle
            if handle is None:
                raise SinkWriteFailed(sink=self.name, reason="no open file handle")
            try:
                await asyncio.to_thread(_append, handle, data)
            except (OSError, ValueError) as exc:
                raise SinkWriteFailed(
                    sink=self.name, reason=str(exc), details={"path": state.current_resolved_path}
                ) from exc

    async def close(self) -> None:
        async with self._write_lock:
            handle, self._state.handle = self._state.handle, None
            self._state.current_resolved_path = None
        if handle is not None:
            await asyncio.to_thread(handle.close)

    # ---------------------------------------------------------------------- #
    # Rotation
    # ---------------------------------------------------------------------- #

    async def _rotate(self, new_path: str) -> None:
        state = self._state
        state.is_rotating = True
        try:
            await self._prepare_directory(new_path)
            if state.symlink_name:
                await self._update_symlink(new_path)
            new_handle = await self._open_handle(new_path)

            async with self._write_lock:
                old_handle, state.handle = state.handle, new_handle
                state.current_resolved_path = new_path

            self.rotation_count += 1
            if old_handle is not None:
                await asyncio.to_thread(old_handle.close)
        finally:
            state.is_rotating = False

    async def _prepare_directory(self, path: str) -> None:
        directory = os.path.dirname(path)
        if not directory:
            return
        try:
            await asyncio.to_thread(os.makedirs, directory, exist_ok=True)
        except OSError as exc:
            raise RotationFailed(path=path, reason=f"cannot create directory: {exc}") from exc

    async def _update_symlink(self, target: str) -> None:
        link = self.symlink_path
        if link is None:
            return
        try:
            await asyncio.to_thread(_replace_symlink, target, link)
        except OSError as exc:
            self._error_channel(SymlinkUpdateFailed(link=link, target=target, reason=str(exc)))

    async def _open_handle(self, path: str) -> IO[str]:
        try:
            handle = await asyncio.to_thread(open, path, "a", encoding=self._encoding)
        except OSError as exc:
            raise RotationFailed(path=path, reason=f"cannot open file: {exc}") from exc
        self.open_count += 1
        return handle


def _append(handle: IO[str], data: str) -> None:
    handle.write(data)
    handle.flush()


def _replace_symlink(target: str, link: str) -> None:
    """Point ``link`` at ``target`` by renaming a fresh link over the old one."""
    tmp = f"{link}.{os.getpid()}.tmp"
    if os.path.lexists(tmp):
        os.remove(tmp)
    os.symlink(os.path.abspath(target), tmp)
    try:
        os.replace(tmp, link)
    except OSError:
        os.remove(tmp)
        raise
