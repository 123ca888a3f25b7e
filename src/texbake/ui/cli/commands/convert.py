"""Implementation of the `texbake convert` command."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import sys
from typing import Annotated, Any

import typer
import yaml

from texbake.core.rules import TranscodeRule
from texbake.core.transcoder import DEFAULT_PARSER, MarkupTranscoder

from .._options import OutputPathOption, VerbosityOption
from ..state import configure_logging, emit_error


def load_rule_overrides(path: Path) -> list[TranscodeRule]:
    """Read transcode overrides from a YAML list of ``{tag, extract, replace}``."""
    payload: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    if isinstance(payload, Mapping):
        payload = payload.get("rules", [])
    if not isinstance(payload, list):
        raise ValueError(f"Rules file '{path}' must contain a list of rules.")
    return [TranscodeRule.from_mapping(entry) for entry in payload]


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def convert(
    source: Annotated[
        str,
        typer.Argument(metavar="INPUT", help="HTML file to convert, or '-' for stdin."),
    ],
    output: OutputPathOption = None,
    rules: Annotated[
        Path | None,
        typer.Option(
            "--rules",
            help="YAML file with tag rules overriding or extending the defaults.",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    parser: Annotated[
        str,
        typer.Option("--parser", help="BeautifulSoup parser backend."),
    ] = DEFAULT_PARSER,
    verbose: VerbosityOption = 0,
) -> None:
    """Convert an HTML fragment into LaTeX."""
    configure_logging(verbose)
    try:
        markup = _read_input(source)
        overrides = load_rule_overrides(rules) if rules is not None else None
    except (OSError, ValueError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    latex = MarkupTranscoder(parser=parser).transcode(markup, overrides)

    if output is None:
        typer.echo(latex, nl=not latex.endswith("\n"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(latex, encoding="utf-8")


__all__ = ["convert", "load_rule_overrides"]
