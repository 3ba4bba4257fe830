"""
Multi-sink dispatch engine.

Each registered sink gets its own FIFO queue drained by a dedicated worker
task, so sinks never block each other and every sink sees batches in the
order they were submitted. A batch (one facade call) is enqueued on all sink
queues synchronously, which keeps the records of one call contiguous on every
sink. Within a batch a record is written only after the previous one
succeeded on that sink.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .diagnostics import ErrorChannel, report_error
from .exceptions import LogrollError, RotationInProgress, SinkError, SinkWriteFailed
from .levels import LogLevel
from .records import LogRecord, SinkConfig, SinkKind
from .sinks import BaseSink


@dataclass(frozen=True)
class SinkRegistration:
    id: int
    kind: SinkKind
    min_level: LogLevel
    sink: BaseSink
    config: SinkConfig = field(default_factory=SinkConfig)
    fallback: bool = False

    def accepts(self, record: LogRecord) -> bool:
        return self.min_level.admits(record.level)


@dataclass(eq=False)
class _Delivery:
    """Completion tracking for one submitted batch across all sinks."""

    future: Optional[asyncio.Future]
    pending: int
    failures: List[SinkError] = field(default_factory=list)

    def settle(self, failure: Optional[SinkError]) -> None:
        if failure is not None:
            self.failures.append(failure)
        self.pending -= 1
        if self.pending <= 0 and self.future is not None and not self.future.done():
            self.future.set_result(tuple(self.failures))


_Item = Tuple[Tuple[LogRecord, ...], _Delivery]


class Dispatcher:
    """Fans record batches out to registered sinks.

    Args:
        error_channel: Receives every sink failure
        retry_attempts: Retries for a write rejected with RotationInProgress
        retry_delay: Seconds to wait between those retries
    """

    def __init__(
        self,
        *,
        error_channel: ErrorChannel = report_error,
        retry_attempts: int = 3,
        retry_delay: float = 0.01,
    ) -> None:
        self._error_channel = error_channel
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay
        self._ids = itertools.count(1)
        self._registrations: Dict[int, SinkRegistration] = {}
        self._queues: Dict[int, asyncio.Queue[_Item]] = {}
        self._workers: Dict[int, asyncio.Task] = {}

    @property
    def registrations(self) -> Tuple[SinkRegistration, ...]:
        return tuple(self._registrations.values())

    def add(
        self,
        sink: BaseSink,
        *,
        kind: SinkKind,
        level: LogLevel = LogLevel.DEBUG,
        config: Optional[SinkConfig] = None,
        fallback: bool = False,
    ) -> int:
        """Register a sink and return its id."""
        sink_id = next(self._ids)
        self._registrations[sink_id] = SinkRegistration(
            id=sink_id,
            kind=kind,
            min_level=level,
            sink=sink,
            config=config or SinkConfig(),
            fallback=fallback,
        )
        self._queues[sink_id] = asyncio.Queue()
        return sink_id

    async def remove(self, sink_id: int) -> None:
        """Drain, stop and close one sink."""
        registration = self._registrations[sink_id]
        await self._queues[sink_id].join()
        worker = self._workers.pop(sink_id, None)
        if worker is not None:
            worker.cancel()
            await asyncio.gather(worker, return_exceptions=True)
        del self._registrations[sink_id]
        del self._queues[sink_id]
        await registration.sink.close()

    def submit(self, records: Sequence[LogRecord]) -> asyncio.Future:
        """Enqueue ``records`` as one ordered batch on every accepting sink.

        Returns a future resolving to the tuple of sink failures once every
        sink has processed its share. Must be called from a running loop.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        batch = tuple(records)

        targets = []
        for registration in self._registrations.values():
            accepted = tuple(r for r in batch if registration.accepts(r))
            if accepted:
                targets.append((registration, accepted))

        delivery = _Delivery(future=future, pending=len(targets))
        if not targets:
            future.set_result(())
            return future

        for registration, accepted in targets:
            self._enqueue(registration, accepted, delivery)
        return future

    async def flush(self) -> None:
        """Wait until every queued batch has been processed."""
        for queue in list(self._queues.values()):
            await queue.join()

    async def close(self) -> None:
        """Drain and close every sink, fallback sinks last."""
        await self.flush()
        ordered = sorted(self._registrations.values(), key=lambda r: r.fallback)
        for registration in ordered:
            await self.remove(registration.id)

    # ---------------------------------------------------------------------- #
    # Workers
    # ---------------------------------------------------------------------- #

    def _enqueue(self, registration: SinkRegistration, records: Tuple[LogRecord, ...], delivery: _Delivery) -> None:
        queue = self._queues[registration.id]
        queue.put_nowait((records, delivery))
        if registration.id not in self._workers:
            self._workers[registration.id] = asyncio.get_running_loop().create_task(
                self._run(registration, queue), name=f"logroll-sink-{registration.id}"
            )

    async def _run(self, registration: SinkRegistration, queue: asyncio.Queue[_Item]) -> None:
        while True:
            records, delivery = await queue.get()
            try:
                failure = await self._deliver(registration, records)
            finally:
                queue.task_done()
            delivery.settle(failure)

    async def _deliver(self, registration: SinkRegistration, records: Tuple[LogRecord, ...]) -> Optional[SinkError]:
        for index, record in enumerate(records):
            try:
                await self._write(registration.sink, record)
            except SinkError as exc:
                self._report(exc)
                self._fall_back(registration, records[index:])
                return exc
        return None

    async def _write(self, sink: BaseSink, record: LogRecord) -> None:
        attempts = 0
        while True:
            try:
                await sink.write(record)
                return
            except RotationInProgress:
                attempts += 1
                if attempts > self._retry_attempts:
                    raise
                await asyncio.sleep(self._retry_delay)
            except SinkError:
                raise
            except Exception as exc:
                raise SinkWriteFailed(sink=sink.name, reason=repr(exc)) from exc

    def _fall_back(self, failed: SinkRegistration, records: Tuple[LogRecord, ...]) -> None:
        """Hand records a sink could not write to fallback sinks that skipped them.

        Without a fallback, a record counts as dropped only when no other sink
        accepts it.
        """
        others = [r for r in self._registrations.values() if r.id != failed.id]
        fallbacks = [r for r in others if r.fallback]
        for registration in fallbacks:
            missing = tuple(r for r in records if not registration.accepts(r))
            if missing:
                self._enqueue(registration, missing, _Delivery(future=None, pending=1))
        if fallbacks:
            return

        for record in records:
            if any(r.accepts(record) for r in others):
                continue
            self._report(
                SinkWriteFailed(
                    sink=failed.sink.name,
                    reason="record dropped, no fallback sink",
                    details={"level": record.level.value, "message": record.message},
                )
            )

    def _report(self, exc: LogrollError) -> None:
        self._error_channel(exc)
