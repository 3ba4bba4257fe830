"""
Process-wide configuration and stdlib bridge tests.
"""

from __future__ import annotations

import logging

import pytest

import logroll.core as core
from logroll import configure_logging, get_logger, shutdown_logging
from logroll.config import LoggingSettings
from logroll.interceptors import RedirectStdLibHandler, intercept_stdlib
from logroll.levels import LogLevel


@pytest.fixture(autouse=True)
def reset_global_facade(monkeypatch):
    monkeypatch.setattr(core, "_facade", None)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestConfigureLogging:
    async def test_overrides_are_validated(self, tmp_path) -> None:
        facade = configure_logging(LoggingSettings(console=False), filename="app.log", log_root=str(tmp_path))
        assert facade.settings.filename == "app.log"
        assert facade.has_durable_sink is True
        assert get_logger() is facade
        await shutdown_logging()
        assert core._facade is None

    async def test_get_logger_configures_default(self, monkeypatch) -> None:
        monkeypatch.setenv("LOGROLL_CONSOLE", "false")
        facade = get_logger()
        assert get_logger() is facade
        assert facade.dispatcher.registrations == ()
        await shutdown_logging()

    async def test_capture_stdlib(self, tmp_path) -> None:
        configure_logging(LoggingSettings(console=False), capture_stdlib=True)
        assert any(isinstance(h, RedirectStdLibHandler) for h in logging.getLogger().handlers)
        await shutdown_logging()


class TestStdlibBridge:
    async def test_records_forwarded_with_mapped_level(self, tmp_path, console_stream) -> None:
        from logroll.facade import LogFacade

        facade = LogFacade(LoggingSettings(colorize=False), stream=console_stream)
        intercept_stdlib(facade)

        logging.getLogger("thirdparty.client").warning("retrying %s", "upstream")
        await facade.flush()

        assert "   WARNING | retrying upstream logger=thirdparty.client" in console_stream.getvalue()
        await facade.close()

    async def test_exception_text_attached(self, console_stream) -> None:
        from logroll.facade import LogFacade

        facade = LogFacade(LoggingSettings(colorize=False), stream=console_stream)
        intercept_stdlib(facade)

        try:
            raise ValueError("bad input")
        except ValueError:
            logging.getLogger("thirdparty").exception("failed")
        await facade.flush()

        assert "ERROR | failed" in console_stream.getvalue()
        assert "ValueError: bad input" in console_stream.getvalue()
        await facade.close()

    def test_level_mapping(self) -> None:
        assert LogLevel.from_stdlib(logging.DEBUG) is LogLevel.DEBUG
        assert LogLevel.from_stdlib(logging.INFO) is LogLevel.INFO
        assert LogLevel.from_stdlib(logging.WARNING) is LogLevel.WARNING
        assert LogLevel.from_stdlib(logging.ERROR) is LogLevel.ERROR
        assert LogLevel.from_stdlib(logging.CRITICAL) is LogLevel.CRITICAL
