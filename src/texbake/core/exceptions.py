"""Custom exception hierarchy for the conversion and compilation pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover - typing only
    from texbake.adapters.latex.log import LatexMessage


class TexbakeError(RuntimeError):
    """Base exception for texbake failures."""


class ViewNotFoundError(TexbakeError):
    """Raised when a view identifier does not resolve to a template."""

    def __init__(self, view: str) -> None:
        super().__init__(f"View {view} not found.")
        self.view = view


class WorkspaceError(TexbakeError):
    """Raised when the temporary workspace cannot be allocated."""


class CompilationError(TexbakeError):
    """Raised when the LaTeX compiler reports a failure.

    ``diagnostic`` holds the compiler log contents when one was found, the
    captured process output otherwise. ``leftovers`` lists the workspace files
    that were still on disk when the error was raised.
    """

    def __init__(
        self,
        diagnostic: str,
        *,
        returncode: int | None = None,
        leftovers: Sequence[Path] = (),
    ) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.returncode = returncode
        self.leftovers = tuple(leftovers)

    def messages(self) -> list[LatexMessage]:
        """Return the error messages found in the diagnostic."""
        from texbake.adapters.latex.log import LatexMessageSeverity, parse_latex_log

        return [
            message
            for message in parse_latex_log(self.diagnostic)
            if message.severity is LatexMessageSeverity.ERROR
        ]


@dataclass(frozen=True, slots=True)
class InvalidContentType:
    """Structured response returned when an unsupported content type is requested."""

    message: str = "Wrong type set. Use raw or base64."
    status: int = 400

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message}


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "CompilationError",
    "InvalidContentType",
    "TexbakeError",
    "ViewNotFoundError",
    "WorkspaceError",
    "exception_hint",
    "exception_messages",
]
