"""Typer application wiring for the texbake CLI."""

from __future__ import annotations

import typer

from .commands import build, convert, dry_run
from .state import emit_error, get_cli_state


app = typer.Typer(
    help="Convert HTML to LaTeX and compile LaTeX to PDF.",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)

app.command()(convert)
app.command()(build)
app.command(name="dry-run")(dry_run)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            state.err_console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
