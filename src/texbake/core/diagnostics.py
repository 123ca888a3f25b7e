"""Event sinks notified when a PDF is generated or a generation fails."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)

PDF_GENERATED = "pdf_generated"
PDF_FAILED = "pdf_failed"


@runtime_checkable
class EventSink(Protocol):
    """Interface receiving fire-and-forget generation events."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullSink:
    """Sink that ignores every event."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingSink:
    """Sink that forwards events to the standard logging module."""

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message is None:
            self._logger.debug("event %s: %s", name, dict(payload))
        elif name == PDF_FAILED:
            self._logger.warning(message)
        else:
            self._logger.info(message)


@dataclass
class RecordingSink:
    """Sink keeping every event in memory, in emission order."""

    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def named(self, name: str) -> list[dict[str, Any]]:
        """Return the payloads recorded under ``name``."""
        return [payload for event_name, payload in self.events if event_name == name]


def emit_generated(
    sink: EventSink, artifact: str, mode: str, metadata: Any = None
) -> None:
    """Notify ``sink`` that an artifact was produced for ``mode``."""
    sink.event(PDF_GENERATED, {"artifact": artifact, "mode": mode, "metadata": metadata})


def emit_failed(
    sink: EventSink, file_name: str, mode: str, reason: Any = None, metadata: Any = None
) -> None:
    """Notify ``sink`` that producing ``file_name`` failed."""
    sink.event(
        PDF_FAILED,
        {"file_name": file_name, "mode": mode, "reason": reason, "metadata": metadata},
    )


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for known events."""
    data = dict(payload)

    if name == PDF_GENERATED:
        artifact = data.get("artifact") or "<unknown>"
        return f"Generated PDF {artifact} ({data.get('mode') or 'unknown'})"

    if name == PDF_FAILED:
        file_name = data.get("file_name") or "<unnamed>"
        reason = data.get("reason")
        suffix = f": {reason}" if reason else ""
        return f"PDF generation failed for {file_name} ({data.get('mode') or 'unknown'}){suffix}"

    return None


__all__ = [
    "PDF_FAILED",
    "PDF_GENERATED",
    "EventSink",
    "LoggingSink",
    "NullSink",
    "RecordingSink",
    "emit_failed",
    "emit_generated",
    "format_event_message",
]
