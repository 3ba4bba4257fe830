import io
import typing as t

import pytest

from logroll.exceptions import LogrollError


@pytest.fixture
def errors() -> list[LogrollError]:
    """Error channel collecting reports instead of printing them."""
    return []


@pytest.fixture
def error_channel(errors) -> t.Callable[[LogrollError], None]:
    return errors.append


@pytest.fixture
def console_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment variables out of settings."""
    monkeypatch.delenv("LOGROOT", raising=False)
    for name in ("CONSOLE", "FILENAME", "RAW_JSON", "SYMLINK", "LOG_ROOT", "CAPTURE_STDLIB"):
        monkeypatch.delenv(f"LOGROLL_{name}", raising=False)
