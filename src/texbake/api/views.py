"""LaTeX view templates rendered with Jinja2.

Views are ``.tex`` files below a views directory. A dotted identifier such as
``invoices.monthly`` resolves to ``invoices/monthly.tex``. The Jinja2
delimiters are swapped for LaTeX-friendly ones so braces and ``#`` keep their
LaTeX meaning::

    \\VAR{name}            variable
    \\BLOCK{for x in xs}   statement
    \\COMMENT{ignored}     comment
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from texbake.core.exceptions import ViewNotFoundError


VIEW_SUFFIX = ".tex"


@dataclass(frozen=True, slots=True)
class RawTex:
    """LaTeX source used as-is instead of rendering a view."""

    tex: str

    def get_tex(self) -> str:
        return self.tex


class ViewRenderer:
    """Resolve view identifiers and render them with a data mapping."""

    def __init__(self, views_path: Path | str | None) -> None:
        self.views_path = Path(views_path) if views_path is not None else None
        search_path = [str(self.views_path)] if self.views_path is not None else []
        self.env = Environment(
            block_start_string=r"\BLOCK{",
            block_end_string=r"}",
            variable_start_string=r"\VAR{",
            variable_end_string=r"}",
            comment_start_string=r"\COMMENT{",
            comment_end_string=r"}",
            loader=FileSystemLoader(search_path),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    @staticmethod
    def template_name(view: str) -> str:
        return view.replace(".", "/") + VIEW_SUFFIX

    def exists(self, view: str) -> bool:
        if self.views_path is None:
            return False
        return (self.views_path / self.template_name(view)).is_file()

    def render(self, view: str, data: Mapping[str, Any] | None = None) -> str:
        """Render ``view`` with ``data``; raise :class:`ViewNotFoundError` when missing."""
        if not self.exists(view):
            raise ViewNotFoundError(view)
        try:
            template = self.env.get_template(self.template_name(view))
        except TemplateNotFound as exc:  # pragma: no cover - raced with exists()
            raise ViewNotFoundError(view) from exc
        return template.render(**dict(data or {}))


__all__ = ["VIEW_SUFFIX", "RawTex", "ViewRenderer"]
