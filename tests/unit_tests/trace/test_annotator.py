"""
TraceAnnotator unit tests: ids, decorated messages and stack trimming.
"""

from __future__ import annotations

import uuid

from logroll.trace import TraceAnnotator, internal_frame


@internal_frame
def _internal_wrapper(annotator: TraceAnnotator, message: str, expected: int = 1):
    return annotator.annotate(message, expected_internal=expected)


def _user_helper(annotator: TraceAnnotator):
    return _internal_wrapper(annotator, "from helper")


class TestTraceIds:
    """Correlation ids"""

    def test_id_is_uuid4(self) -> None:
        envelope = TraceAnnotator().annotate("msg")
        assert uuid.UUID(envelope.id).version == 4

    def test_ids_do_not_collide(self) -> None:
        ids = {TraceAnnotator.new_id() for _ in range(10_000)}
        assert len(ids) == 10_000

    def test_decorated_message(self) -> None:
        envelope = TraceAnnotator().annotate("disk full")
        assert envelope.decorated_message == f"disk full | trace: {envelope.id}"


class TestStackText:
    """Caller stack capture"""

    def test_first_line_is_trace_id(self) -> None:
        envelope = TraceAnnotator().annotate("msg")
        first_line = envelope.stack_text.splitlines()[0]
        assert first_line == envelope.id
        assert "Error" not in first_line

    def test_internal_frames_are_skipped(self) -> None:
        envelope = _user_helper(TraceAnnotator())
        assert "_user_helper" in envelope.stack_text
        assert not any(line.endswith("in _internal_wrapper") for line in envelope.stack_text.splitlines())
        assert not any(line.endswith("in annotate") for line in envelope.stack_text.splitlines())
        assert envelope.degraded is False
        assert envelope.skipped_frames == 1

    def test_caller_frame_is_last(self) -> None:
        envelope = _user_helper(TraceAnnotator())
        frames = [line for line in envelope.stack_text.splitlines() if line.lstrip().startswith("File ")]
        assert frames[-1].endswith("in _user_helper")
        assert frames[-2].endswith("in test_caller_frame_is_last")

    def test_missing_internal_frames_marks_degraded(self) -> None:
        envelope = TraceAnnotator().annotate("direct", expected_internal=2)
        assert envelope.degraded is True
        assert envelope.skipped_frames == 0
        # nothing user-visible was stripped
        assert "test_missing_internal_frames_marks_degraded" in envelope.stack_text

    def test_limit_bounds_frame_count(self) -> None:
        envelope = TraceAnnotator(limit=1).annotate("short")
        frames = [line for line in envelope.stack_text.splitlines() if line.lstrip().startswith("File ")]
        assert len(frames) == 1
        assert "test_limit_bounds_frame_count" in frames[0]
