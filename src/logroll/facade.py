"""
Public logging facade.

``LogFacade`` exposes one method per syslog level. Informational levels emit a
single record. ``error``, ``debug`` and ``critical`` also capture the caller
stack: they emit the message tagged with a trace id, followed by the stack
text at ``debug`` level, as one ordered batch on every sink.

Every method submits synchronously and returns an ``asyncio.Future``. Callers
may ignore it (fire and forget) or await it to know that all sinks processed
the records. A running event loop is required.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from .config import LoggingSettings
from .diagnostics import ErrorChannel, report_error
from .dispatcher import Dispatcher
from .exceptions import SinkError, StackCaptureDegraded
from .levels import LogLevel
from .records import LogRecord, SinkConfig
from .rotation import RotatingFileSink
from .sinks import ConsoleSink
from .trace import TraceAnnotator, internal_frame

Callback = Callable[[Optional[SinkError]], Any]

# Frames between a caller and TraceAnnotator.annotate: the level method and _diagnostic.
_DIAGNOSTIC_DEPTH = 2


class LogFacade:
    """Routes leveled records to the console and a rotating file.

    Args:
        settings: Construction options; defaults are read from the environment
        stream: Console stream (default: stdout)
        error_channel: Receives sink failures and degradations
        clock: Returns the submission time of each record
        annotator: Trace annotator used by diagnostic levels
    """

    def __init__(
        self,
        settings: LoggingSettings | None = None,
        *,
        stream: Any = None,
        error_channel: ErrorChannel = report_error,
        clock: Callable[[], datetime] = datetime.now,
        annotator: TraceAnnotator | None = None,
    ) -> None:
        self.settings = settings or LoggingSettings()
        self._error_channel = error_channel
        self._clock = clock
        self._annotator = annotator or TraceAnnotator()
        self._dispatcher = Dispatcher(
            error_channel=error_channel,
            retry_attempts=self.settings.rotation_retry_attempts,
            retry_delay=self.settings.rotation_retry_delay,
        )
        self._initialize_sinks(stream)

    def _initialize_sinks(self, stream: Any) -> None:
        s = self.settings
        if s.console:
            config = SinkConfig(colorize=s.colorize)
            self._dispatcher.add(
                ConsoleSink(stream, colorize=s.colorize),
                kind="console",
                level=s.console_level,
                config=config,
                fallback=True,
            )
        if s.filename:
            config = SinkConfig(json_output=s.raw_json, symlink=s.symlink, log_root=s.log_root)
            self._dispatcher.add(
                RotatingFileSink(
                    s.filename,
                    log_root=s.log_root,
                    symlink=s.symlink,
                    json_output=s.raw_json,
                    error_channel=self._error_channel,
                ),
                kind="rotating_file",
                level=s.file_level,
                config=config,
            )

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def has_durable_sink(self) -> bool:
        return any(r.kind == "rotating_file" for r in self._dispatcher.registrations)

    # ---------------------------------------------------------------------- #
    # Severity methods
    # ---------------------------------------------------------------------- #

    @internal_frame
    def debug(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self._diagnostic(LogLevel.DEBUG, message, meta, callback)

    def info(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        meta, callback = _split_meta(meta, callback)
        record = self._record(LogLevel.INFO, message, self._durable_meta(meta))
        return self._submit([record], callback)

    log = info

    def notice(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self.emit(LogLevel.NOTICE, message, meta, callback)

    def warning(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self.emit(LogLevel.WARNING, message, meta, callback)

    warn = warning

    @internal_frame
    def error(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self._diagnostic(LogLevel.ERROR, message, meta, callback)

    err = error

    @internal_frame
    def critical(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self._diagnostic(LogLevel.CRITICAL, message, meta, callback)

    crit = critical

    def alert(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self.emit(LogLevel.ALERT, message, meta, callback)

    def emergency(self, message: str, meta: Any = None, callback: Optional[Callback] = None) -> asyncio.Future:
        return self.emit(LogLevel.EMERGENCY, message, meta, callback)

    emerg = emergency

    def emit(
        self,
        level: LogLevel,
        message: str,
        meta: Any = None,
        callback: Optional[Callback] = None,
    ) -> asyncio.Future:
        """Dispatch a single record at ``level`` without trace annotation."""
        meta, callback = _split_meta(meta, callback)
        return self._submit([self._record(level, message, meta)], callback)

    # ---------------------------------------------------------------------- #
    # Composition
    # ---------------------------------------------------------------------- #

    def extend(self, target: Any) -> Extension:
        """Expose this logger's methods on ``target`` without mutating it."""
        return Extension(target, LoggerCapability(self))

    # ---------------------------------------------------------------------- #
    # Lifecycle
    # ---------------------------------------------------------------------- #

    async def flush(self) -> None:
        await self._dispatcher.flush()

    async def close(self) -> None:
        await self._dispatcher.close()

    async def __aenter__(self) -> LogFacade:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ---------------------------------------------------------------------- #
    # Internals
    # ---------------------------------------------------------------------- #

    @internal_frame
    def _diagnostic(
        self,
        level: LogLevel,
        message: str,
        meta: Any,
        callback: Optional[Callback],
    ) -> asyncio.Future:
        meta, callback = _split_meta(meta, callback)
        envelope = self._annotator.annotate(message, expected_internal=_DIAGNOSTIC_DEPTH)
        if envelope.degraded:
            self._error_channel(
                StackCaptureDegraded(
                    trace_id=envelope.id, expected=_DIAGNOSTIC_DEPTH, skipped=envelope.skipped_frames
                )
            )

        meta = self._durable_meta(meta)
        created = self._clock()
        records = [
            self._record(level, envelope.decorated_message, meta, trace_id=envelope.id, created=created),
            self._record(
                LogLevel.DEBUG,
                envelope.stack_text,
                meta,
                trace_id=envelope.id,
                stack_text=envelope.stack_text,
                created=created,
            ),
        ]
        return self._submit(records, callback)

    def _durable_meta(self, meta: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
        """Console-only setups drop metadata to keep the console readable."""
        if meta and self.has_durable_sink:
            return meta
        return {}

    def _record(
        self,
        level: LogLevel,
        message: str,
        meta: Optional[Mapping[str, Any]],
        *,
        trace_id: Optional[str] = None,
        stack_text: Optional[str] = None,
        created: Optional[datetime] = None,
    ) -> LogRecord:
        created = created or self._clock()
        return LogRecord(
            message=str(message),
            level=level,
            timestamp=created.strftime(self.settings.timestamp_format),
            created=created,
            meta=dict(meta or {}),
            trace_id=trace_id,
            stack_text=stack_text,
        )

    def _submit(self, records: Sequence[LogRecord], callback: Optional[Callback]) -> asyncio.Future:
        future = self._dispatcher.submit(records)
        if callback is not None:
            future.add_done_callback(lambda f: callback(_first(f.result())))
        return future


def _split_meta(meta: Any, callback: Optional[Callback]) -> tuple[Optional[Mapping[str, Any]], Optional[Callback]]:
    """Allow ``method(message, callback)`` as in ``method(message, meta, callback)``."""
    if callable(meta) and callback is None:
        return None, meta
    return meta, callback


def _first(failures: Iterable[SinkError]) -> Optional[SinkError]:
    return next(iter(failures), None)


# =============================================================================
# Capability Composition
# =============================================================================

METHOD_NAMES = (
    "debug",
    "info",
    "log",
    "notice",
    "warn",
    "warning",
    "error",
    "err",
    "crit",
    "critical",
    "alert",
    "emerg",
    "emergency",
)


class LoggerCapability:
    """The severity method set of a facade, without the facade's other surface.

    Attribute access hands out the facade's bound methods directly, so no
    extra frame appears in captured stacks.
    """

    __slots__ = ("_facade",)

    def __init__(self, facade: LogFacade) -> None:
        self._facade = facade

    def __getattr__(self, name: str) -> Any:
        if name in METHOD_NAMES:
            return getattr(self._facade, name)
        raise AttributeError(f"'{type(self).__name__}' has no attribute {name!r}")

    def __dir__(self) -> list[str]:
        return list(METHOD_NAMES)


class Extension:
    """``target`` composed with a LoggerCapability.

    Logging method names resolve to the capability; everything else is
    forwarded to the target.
    """

    __slots__ = ("_target", "_capability")

    def __init__(self, target: Any, capability: LoggerCapability) -> None:
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_capability", capability)

    @property
    def target(self) -> Any:
        return self._target

    def __getattr__(self, name: str) -> Any:
        if name in METHOD_NAMES:
            return getattr(self._capability, name)
        return getattr(self._target, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in METHOD_NAMES:
            raise AttributeError(f"cannot replace logging method {name!r}")
        setattr(self._target, name, value)
