"""LaTeX compiler integration."""

from __future__ import annotations

from .artifacts import ArtifactHandle, ArtifactRegistry
from .log import LatexMessage, LatexMessageSeverity, parse_latex_log
from .pipeline import CompilationPipeline, CompilationResult
from .workspace import Workspace


__all__ = [
    "ArtifactHandle",
    "ArtifactRegistry",
    "CompilationPipeline",
    "CompilationResult",
    "LatexMessage",
    "LatexMessageSeverity",
    "Workspace",
    "parse_latex_log",
]
