"""Implementation of the `texbake build` and `texbake dry-run` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from texbake.adapters.latex.log import LatexLogRenderer
from texbake.api.document import DRY_RUN_NAME, Document
from texbake.api.views import RawTex
from texbake.core.config import CompilerConfig, load_config
from texbake.core.diagnostics import LoggingSink
from texbake.core.exceptions import CompilationError, TexbakeError

from .._options import (
    CompilerOption,
    ConfigOption,
    OutputPathOption,
    TempDirOption,
    TimeoutOption,
    VerbosityOption,
)
from ..state import configure_logging, emit_error, get_cli_state


_DIAGNOSTIC_TAIL = 20


def _resolve_config(
    config: Path | None,
    compiler: str | None,
    temp_dir: Path | None,
    timeout: float | None,
) -> CompilerConfig:
    try:
        return load_config(config, bin_path=compiler, temp_path=temp_dir, timeout=timeout)
    except (OSError, ValueError) as exc:
        emit_error("Invalid configuration.", exception=exc)
        raise typer.Exit(code=1) from exc


def report_compilation_error(exc: CompilationError) -> None:
    """Print the parsed compiler errors, or the tail of the raw diagnostic."""
    state = get_cli_state()
    emit_error("LaTeX compilation failed.")
    messages = exc.messages()
    if messages:
        LatexLogRenderer(state.err_console).render(messages)
    else:
        tail = exc.diagnostic.strip().splitlines()[-_DIAGNOSTIC_TAIL:]
        for line in tail:
            state.err_console.print(line, markup=False)
    for path in exc.leftovers:
        state.err_console.print(f"kept {path}", style="dim", markup=False)


def build(
    source: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            help="LaTeX source file to compile.",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: OutputPathOption = None,
    config: ConfigOption = None,
    compiler: CompilerOption = None,
    temp_dir: TempDirOption = None,
    timeout: TimeoutOption = None,
    verbose: VerbosityOption = 0,
) -> None:
    """Compile a LaTeX file into a PDF."""
    configure_logging(verbose)
    settings = _resolve_config(config, compiler, temp_dir, timeout)
    target = output or source.with_suffix(".pdf")
    document = Document(
        RawTex(source.read_text(encoding="utf-8")),
        config=settings,
        sink=LoggingSink(),
    )
    try:
        moved = document.save_pdf(target)
    except CompilationError as exc:
        report_compilation_error(exc)
        raise typer.Exit(code=1) from exc
    except TexbakeError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    if not moved:
        emit_error(f"Unable to write {target}.")
        raise typer.Exit(code=1)
    get_cli_state().console.print(f"Wrote {target}", markup=False)


def dry_run(
    output: OutputPathOption = None,
    config: ConfigOption = None,
    compiler: CompilerOption = None,
    temp_dir: TempDirOption = None,
    verbose: VerbosityOption = 0,
) -> None:
    """Compile a bundled sample document to check the LaTeX toolchain."""
    configure_logging(verbose)
    settings = _resolve_config(config, compiler, temp_dir, None)
    target = output or Path(DRY_RUN_NAME)
    try:
        with Document(config=settings, sink=LoggingSink()).dry_run() as delivery:
            delivery.artifact.move_to(target)
    except CompilationError as exc:
        report_compilation_error(exc)
        raise typer.Exit(code=1) from exc
    except (TexbakeError, OSError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    get_cli_state().console.print(f"Wrote {target}", markup=False)


__all__ = ["build", "dry_run", "report_compilation_error"]
