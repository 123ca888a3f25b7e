import logging

import pytest

from texbake.core.diagnostics import (
    PDF_FAILED,
    PDF_GENERATED,
    EventSink,
    LoggingSink,
    NullSink,
    RecordingSink,
    emit_failed,
    emit_generated,
    format_event_message,
)


def test_sinks_satisfy_protocol() -> None:
    assert isinstance(NullSink(), EventSink)
    assert isinstance(LoggingSink(), EventSink)
    assert isinstance(RecordingSink(), EventSink)


def test_recording_sink_keeps_order() -> None:
    sink = RecordingSink()
    emit_generated(sink, "a.pdf", "download", {"k": 1})
    emit_failed(sink, "b", "content", "Wrong type set")
    assert [name for name, _ in sink.events] == [PDF_GENERATED, PDF_FAILED]
    assert sink.named(PDF_GENERATED) == [
        {"artifact": "a.pdf", "mode": "download", "metadata": {"k": 1}}
    ]
    assert sink.named(PDF_FAILED)[0]["reason"] == "Wrong type set"


def test_format_event_message() -> None:
    assert (
        format_event_message(PDF_GENERATED, {"artifact": "a.pdf", "mode": "inline"})
        == "Generated PDF a.pdf (inline)"
    )
    assert (
        format_event_message(PDF_FAILED, {"file_name": "", "mode": "content", "reason": "bad"})
        == "PDF generation failed for <unnamed> (content): bad"
    )
    assert format_event_message("other", {}) is None


def test_logging_sink_levels(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingSink()
    with caplog.at_level(logging.DEBUG, logger="texbake.core.diagnostics"):
        emit_generated(sink, "a.pdf", "download")
        emit_failed(sink, "b", "download", "exit status 1")
    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.INFO, logging.WARNING]
