"""High-level document facade: render a view, compile it, hand the PDF over.

Usage Example
:
    >>> from texbake.api import Document, RawTex
    >>> doc = Document(RawTex("\\\\documentclass{article}..."))
    >>> with doc.download("report.pdf") as delivery:  # doctest: +SKIP
    ...     payload = delivery.read_bytes()

Every delivery method compiles a fresh PDF. ``save_pdf`` and ``content``
release the artifact before returning; ``download`` and ``inline`` return a
:class:`Delivery` that keeps the file alive until it is released.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
from pathlib import Path
import shutil
from types import TracebackType
from typing import Any

from texbake.adapters.latex.artifacts import ArtifactHandle
from texbake.adapters.latex.pipeline import CompilationPipeline
from texbake.core.config import CompilerConfig
from texbake.core.diagnostics import EventSink, NullSink, emit_failed, emit_generated
from texbake.core.exceptions import CompilationError, InvalidContentType
from texbake.core.rules import RuleLike
from texbake.core.transcoder import MarkupTranscoder

from .views import RawTex, ViewRenderer


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DRY_RUN_SOURCE = DATA_DIR / "dryrun.tex"
DRY_RUN_NAME = "dryrun.pdf"
PDF_CONTENT_TYPE = "application/pdf"


@dataclass(slots=True)
class Delivery:
    """Compiled PDF ready to be streamed, attached, or copied by the caller."""

    artifact: ArtifactHandle
    file_name: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        return self.artifact.path

    def read_bytes(self) -> bytes:
        return self.artifact.read_bytes()

    def release(self) -> None:
        self.artifact.release()

    def __enter__(self) -> Delivery:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()


class Document:
    """LaTeX document built from a view (or raw source) and a data mapping."""

    def __init__(
        self,
        view: str | RawTex | None = None,
        metadata: Any = None,
        *,
        config: CompilerConfig | None = None,
        views: ViewRenderer | None = None,
        sink: EventSink | None = None,
        pipeline: CompilationPipeline | None = None,
        transcoder: MarkupTranscoder | None = None,
    ) -> None:
        self.config = config or CompilerConfig()
        self.metadata = metadata
        self.sink = sink or NullSink()
        self.views = views or ViewRenderer(self.config.views_path)
        self.pipeline = pipeline or CompilationPipeline(self.config, sink=self.sink)
        self.transcoder = transcoder or MarkupTranscoder()
        self.data: dict[str, Any] = {}
        self._name: str | None = None
        self._view: str | None = None
        self._rendered: str | None = None
        if isinstance(view, RawTex):
            self._rendered = view.get_tex()
        else:
            self._view = view

    @property
    def is_raw(self) -> bool:
        return self._view is None and self._rendered is not None

    @property
    def name(self) -> str | None:
        """File name used when the PDF is packed into an archive."""
        return self._name

    def set_name(self, name: str) -> Document:
        self._name = Path(name).name
        return self

    def with_data(self, data: Mapping[str, Any]) -> Document:
        self.data = dict(data)
        return self

    def render(self) -> str:
        """Return the LaTeX source, rendering the view on first use."""
        if self._rendered is not None:
            return self._rendered
        self._rendered = self.views.render(self._view or "", self.data)
        return self._rendered

    def save_pdf(self, location: Path | str) -> bool:
        """Compile and move the PDF to ``location``."""
        source = self.render()
        with self._generate(source, "savepdf") as artifact:
            try:
                artifact.move_to(location)
                moved = True
            except OSError as exc:
                logger.warning("Unable to move %s to %s: %s", artifact.path, location, exc)
                moved = False
        emit_generated(self.sink, str(location), "savepdf", self.metadata)
        return moved

    def download(self, file_name: str | None = None) -> Delivery:
        """Compile and return the PDF as an attachment delivery."""
        return self._deliver(file_name, "download", "attachment")

    def inline(self, file_name: str | None = None) -> Delivery:
        """Compile and return the PDF for inline display."""
        return self._deliver(file_name, "inline", "inline")

    def content(self, type: str = "raw") -> bytes | str | InvalidContentType:  # noqa: A002
        """Return the compiled PDF as raw bytes or a base64 string.

        Unsupported types produce an :class:`InvalidContentType` response and a
        ``pdf_failed`` event without touching the file system.
        """
        if type not in ("raw", "base64"):
            emit_failed(self.sink, "", "content", "Wrong type set", self.metadata)
            return InvalidContentType()

        source = self.render()
        with self._generate(source, "content") as artifact:
            try:
                payload = artifact.read_bytes() if type == "raw" else artifact.read_base64()
            except OSError as exc:
                emit_failed(
                    self.sink, artifact.name, "content", "output unreadable", self.metadata
                )
                raise CompilationError(
                    f"Compiled PDF {artifact.path} could not be read: {exc}"
                ) from exc
            emit_generated(self.sink, artifact.name, "content", self.metadata)
            return payload

    def dry_run(self) -> Delivery:
        """Compile the bundled sample document to check the toolchain."""
        program = self.config.compiler_program
        if shutil.which(program) is None:
            logger.warning("LaTeX compiler '%s' was not found on PATH", program)
        self._view = None
        self._rendered = DRY_RUN_SOURCE.read_text(encoding="utf-8")
        return self.download(DRY_RUN_NAME)

    def convert_html_to_latex(
        self, markup: str, overrides: Iterable[RuleLike] | None = None
    ) -> str:
        return self.transcoder.transcode(markup, overrides)

    def _deliver(self, file_name: str | None, mode: str, disposition: str) -> Delivery:
        source = self.render()
        artifact = self._generate(source, mode)
        resolved_name = file_name or artifact.name
        emit_generated(self.sink, resolved_name, mode, self.metadata)
        headers = {
            "Content-Type": PDF_CONTENT_TYPE,
            "Content-Disposition": f'{disposition}; filename="{resolved_name}"',
        }
        return Delivery(artifact=artifact, file_name=resolved_name, headers=headers)

    def _generate(self, source: str, mode: str) -> ArtifactHandle:
        return self.pipeline.compile(source, mode=mode, metadata=self.metadata)


__all__ = ["DRY_RUN_NAME", "Delivery", "Document"]
