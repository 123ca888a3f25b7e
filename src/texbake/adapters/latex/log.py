"""Classify LaTeX compiler output into structured messages."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
import re
from typing import ClassVar

from rich.console import Console
from rich.text import Text


class LatexMessageSeverity(Enum):
    """Classification severity extracted from LaTeX output."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class LatexMessage:
    """Structured LaTeX message extracted from a log or process output."""

    severity: LatexMessageSeverity
    summary: str
    details: list[str] = field(default_factory=list)


_MESSAGE_PATTERNS: list[tuple[re.Pattern[str], LatexMessageSeverity]] = [
    (re.compile(r"^! (?P<summary>.+)$"), LatexMessageSeverity.ERROR),
    (re.compile(r"^(?P<summary>.+:\d+: .+)$"), LatexMessageSeverity.ERROR),
    (re.compile(r"^LaTeX Warning: (?P<summary>.+)$"), LatexMessageSeverity.WARNING),
    (
        re.compile(r"^(?:Package|Class) (?P<context>\S+) Warning: (?P<summary>.+)$"),
        LatexMessageSeverity.WARNING,
    ),
    (re.compile(r"^(?:Overfull|Underfull) (?P<summary>\\[hv]box.+)$"), LatexMessageSeverity.WARNING),
    (re.compile(r"^Missing character:(?P<summary>.+)$", re.I), LatexMessageSeverity.WARNING),
    (re.compile(r"^This is (?P<summary>.+)$"), LatexMessageSeverity.INFO),
    (re.compile(r"^Output written on (?P<summary>.+)$"), LatexMessageSeverity.INFO),
]

_ERROR_CONTINUATIONS = (
    "Emergency stop.",
    "==> Fatal error occurred, no output PDF file produced!",
)

_DETAIL_PREFIXES = ("l.", "<read ", "<*> ", "*** ", "Type ", "Enter file name")


class LatexLogParser:
    """Incrementally parse LaTeX output into structured messages."""

    def __init__(self) -> None:
        self._current: LatexMessage | None = None
        self._messages: list[LatexMessage] = []

    @property
    def messages(self) -> Sequence[LatexMessage]:
        return tuple(self._messages)

    def process_line(self, line: str) -> None:
        payload = line.rstrip("\r\n")
        if not payload.strip():
            return

        severity, summary = self._match_message(payload)
        if severity is not None and summary is not None:
            if (
                summary in _ERROR_CONTINUATIONS
                and self._current is not None
                and self._current.severity is LatexMessageSeverity.ERROR
            ):
                self._current.details.append(summary)
                return
            self._finalize_current()
            self._current = LatexMessage(severity=severity, summary=summary)
            return

        if self._current is not None and payload.startswith(_DETAIL_PREFIXES):
            self._current.details.append(payload.strip())

    def finalize(self) -> list[LatexMessage]:
        """Flush any pending message and return every message seen."""
        self._finalize_current()
        return list(self._messages)

    def _finalize_current(self) -> None:
        if self._current is None:
            return
        self._messages.append(self._current)
        self._current = None

    @staticmethod
    def _match_message(line: str) -> tuple[LatexMessageSeverity | None, str | None]:
        stripped = line.strip()
        if stripped in _ERROR_CONTINUATIONS:
            return LatexMessageSeverity.ERROR, stripped
        for pattern, severity in _MESSAGE_PATTERNS:
            match = pattern.match(line)
            if match:
                summary = match.group("summary").strip() or stripped
                return severity, summary
        return None, None


def parse_latex_log(text: str | Iterable[str]) -> list[LatexMessage]:
    """Parse LaTeX output (a string or an iterable of lines) into messages."""
    lines = text.splitlines() if isinstance(text, str) else text
    parser = LatexLogParser()
    for line in lines:
        parser.process_line(line)
    return parser.finalize()


class LatexLogRenderer:
    """Render structured LaTeX messages to a Rich console."""

    _SUMMARY_STYLE: ClassVar[dict[LatexMessageSeverity, str]] = {
        LatexMessageSeverity.INFO: "cyan",
        LatexMessageSeverity.WARNING: "bold yellow",
        LatexMessageSeverity.ERROR: "bold red",
    }

    def __init__(self, console: Console) -> None:
        self.console = console

    def render(self, messages: Iterable[LatexMessage]) -> None:
        for message in messages:
            line = Text()
            line.append(f"{message.severity.value}: ", style=self._SUMMARY_STYLE[message.severity])
            line.append(message.summary)
            self.console.print(line)
            for detail in message.details:
                self.console.print(Text(f"  {detail}", style="dim"))


__all__ = [
    "LatexLogParser",
    "LatexLogRenderer",
    "LatexMessage",
    "LatexMessageSeverity",
    "parse_latex_log",
]
