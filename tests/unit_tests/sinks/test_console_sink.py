"""
ConsoleSink and formatter unit tests.
"""

from __future__ import annotations

import io
import json
from datetime import datetime

import pytest

from logroll.exceptions import SinkWriteFailed
from logroll.formatters import ConsoleFormatter, format_text
from logroll.levels import LogLevel
from logroll.sinks import ConsoleSink
from tests.helpers import make_record

NOW = datetime(2024, 1, 1, 12, 0, 0)


class TestConsoleFormatter:
    def test_plain_alignment(self) -> None:
        line = ConsoleFormatter.format(make_record(NOW, "hello", level=LogLevel.WARNING), use_color=False)
        assert line == "2024-01-01 12:00:00 |   WARNING | hello"

    def test_meta_rendered_as_pairs(self) -> None:
        record = make_record(NOW, "hello", meta={"a": 1, "b": "x"})
        line = ConsoleFormatter.format(record, use_color=False)
        assert line.endswith("| hello a=1 b=x")

    def test_colors(self) -> None:
        line = ConsoleFormatter.format(make_record(NOW, "boom", level=LogLevel.ERROR), use_color=True)
        assert "\x1b[31m" in line
        assert line.endswith("boom")


class TestTextFormat:
    def test_without_meta(self) -> None:
        assert format_text(make_record(NOW, "plain")) == "2024-01-01 12:00:00 info: plain\n"

    def test_unserializable_meta_falls_back_to_str(self) -> None:
        text = format_text(make_record(NOW, "obj", meta={"when": object}))
        assert json.loads(text.split("\n", 1)[1])["when"] == str(object)


class TestConsoleSink:
    async def test_writes_line(self) -> None:
        stream = io.StringIO()
        await ConsoleSink(stream, colorize=False).write(make_record(NOW, "hi"))
        assert stream.getvalue() == "2024-01-01 12:00:00 |      INFO | hi\n"

    async def test_json_output(self) -> None:
        stream = io.StringIO()
        await ConsoleSink(stream, json_output=True).write(make_record(NOW, "hi"))
        assert json.loads(stream.getvalue())["message"] == "hi"

    def test_color_follows_isatty(self) -> None:
        assert ConsoleSink(io.StringIO()).use_color is False
        assert ConsoleSink(io.StringIO(), colorize=True).use_color is True

    async def test_closed_stream_raises_sink_error(self) -> None:
        stream = io.StringIO()
        stream.close()
        with pytest.raises(SinkWriteFailed):
            await ConsoleSink(stream, colorize=False).write(make_record(NOW, "hi"))
