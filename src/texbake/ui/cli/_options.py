"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file holding the compiler configuration.",
        dir_okay=False,
    ),
]

CompilerOption = Annotated[
    str | None,
    typer.Option(
        "--compiler",
        help="LaTeX compiler executable (defaults to pdflatex).",
    ),
]

TempDirOption = Annotated[
    Path | None,
    typer.Option(
        "--temp-dir",
        help="Directory used for the compilation workspace.",
        file_okay=False,
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Kill the compiler after this many seconds.",
        min=0.1,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Destination file. Defaults to stdout for text output.",
        dir_okay=False,
    ),
]

VerbosityOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (repeat for debug output).",
    ),
]
