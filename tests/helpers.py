import typing as t
from datetime import datetime

from logroll.levels import LogLevel
from logroll.records import LogRecord


def make_record(
    created: datetime,
    message: str = "hello",
    level: LogLevel = LogLevel.INFO,
    **kwargs: t.Any,
) -> LogRecord:
    return LogRecord(
        message=message,
        level=level,
        timestamp=created.strftime("%Y-%m-%d %H:%M:%S"),
        created=created,
        **kwargs,
    )


class FrozenClock:
    """Manually advanced clock for facades."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now
