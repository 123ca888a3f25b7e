"""texbake: HTML to LaTeX transcoding and LaTeX to PDF compilation.

Architecture
: `MarkupTranscoder` rewrites a fixed, overridable vocabulary of HTML tags into
  LaTeX commands. It performs no I/O.
: `CompilationPipeline` runs the LaTeX compiler inside a random temporary
  workspace and hands the PDF back through a scoped `ArtifactHandle`.
: `Document` composes a view renderer with the pipeline and exposes the
  delivery modes (save, download, inline, content).

Usage Example
:
    >>> from texbake import transcode
    >>> transcode("<p>Hello <b>world</b></p>")
    'Hello \\\\textbf{world} \\\\newline '
"""

from __future__ import annotations

from .adapters.latex.artifacts import ArtifactHandle
from .adapters.latex.pipeline import CompilationPipeline, CompilationResult
from .api.document import Delivery, Document
from .api.views import RawTex, ViewRenderer
from .core.config import CompilerConfig, load_config
from .core.exceptions import (
    CompilationError,
    InvalidContentType,
    TexbakeError,
    ViewNotFoundError,
    WorkspaceError,
)
from .core.rules import DEFAULT_RULES, Extract, RuleTable, TranscodeRule
from .core.transcoder import MarkupTranscoder, transcode


__version__ = "0.1.0"

__all__ = [
    "DEFAULT_RULES",
    "ArtifactHandle",
    "CompilationError",
    "CompilationPipeline",
    "CompilationResult",
    "CompilerConfig",
    "Delivery",
    "Document",
    "Extract",
    "InvalidContentType",
    "MarkupTranscoder",
    "RawTex",
    "RuleTable",
    "TexbakeError",
    "TranscodeRule",
    "ViewNotFoundError",
    "ViewRenderer",
    "WorkspaceError",
    "__version__",
    "load_config",
    "transcode",
]
