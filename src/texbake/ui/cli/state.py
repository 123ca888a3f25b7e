"""Shared CLI state: consoles and error reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import sys
from typing import TYPE_CHECKING

from texbake.core.exceptions import exception_hint


if TYPE_CHECKING:
    from rich.console import Console


@dataclass(slots=True)
class CLIState:
    """Runtime options shared by every command."""

    verbosity: int = 0
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Return a lazily instantiated stdout console."""
        from rich.console import Console

        if self._console is None or getattr(self._console, "file", None) is not sys.stdout:
            self._console = Console(file=sys.stdout, highlight=False)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a lazily instantiated stderr console."""
        from rich.console import Console

        if self._err_console is None or getattr(self._err_console, "file", None) is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console

    @property
    def show_tracebacks(self) -> bool:
        return self.verbosity >= 2


_STATE = CLIState()


def get_cli_state() -> CLIState:
    return _STATE


def configure_logging(verbosity: int) -> None:
    """Route library logging to stderr according to ``verbosity``."""
    _STATE.verbosity = verbosity
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("texbake").setLevel(level)


def emit_error(message: str, exception: BaseException | None = None) -> None:
    """Print an error, with the most specific cause when one is available."""
    from rich.text import Text

    hint = exception_hint(exception) if exception is not None else None
    console = _STATE.err_console
    console.print(Text.assemble(("error:", "bold red"), " ", message), soft_wrap=True)
    if hint and hint != message:
        console.print(Text(f"  {hint}", style="dim"), soft_wrap=True)


__all__ = [
    "CLIState",
    "configure_logging",
    "emit_error",
    "get_cli_state",
]
