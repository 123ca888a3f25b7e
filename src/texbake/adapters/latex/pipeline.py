"""Compile LaTeX source text into a PDF with an external compiler.

One call walks ``pending -> source written -> process ran -> succeeded |
failed -> cleaned up``:

- a random workspace is allocated in the configured temporary directory and
  the source is written to its extension-less base file;
- ``<compiler> -output-directory <dir> <base>`` runs synchronously with
  stdout and stderr merged;
- on success the source and the ``.aux``/``.log``/``.out`` files are removed
  and the PDF is handed back through an :class:`ArtifactHandle`;
- on failure a ``pdf_failed`` event is emitted and :class:`CompilationError`
  carries the diagnostic. The auxiliary files are left in place unless
  ``clean_on_failure`` is set.

The failure diagnostic is read from ``<base>log``, the base name with
``log`` appended and no dot. Compilers write ``<base>.log``, so in practice
the captured process output is what ends up in the diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess
from typing import Any

from texbake.core.config import CompilerConfig
from texbake.core.diagnostics import EventSink, NullSink, emit_failed
from texbake.core.exceptions import CompilationError

from .artifacts import ArtifactHandle, ArtifactRegistry
from .workspace import Workspace, remove_quietly


logger = logging.getLogger(__name__)

FAILURE_LOG_SUFFIX = "log"


@dataclass(slots=True)
class CompilationResult:
    """Outcome of :meth:`CompilationPipeline.run`.

    Exactly one of ``artifact`` and ``diagnostic`` is set.
    """

    artifact: ArtifactHandle | None = None
    diagnostic: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.artifact is not None

    @property
    def artifact_path(self) -> Path | None:
        return self.artifact.path if self.artifact is not None else None


class CompilationPipeline:
    """Drive the LaTeX compiler through a managed temporary workspace."""

    def __init__(
        self,
        config: CompilerConfig | None = None,
        *,
        sink: EventSink | None = None,
        registry: ArtifactRegistry | None = None,
    ) -> None:
        self.config = config or CompilerConfig()
        self.sink = sink or NullSink()
        self.registry = registry

    def build_command(self, workspace: Workspace) -> list[str]:
        return [
            self.config.compiler_program,
            "-output-directory",
            str(workspace.directory),
            str(workspace.base),
        ]

    def compile(
        self,
        source: str,
        *,
        mode: str = "download",
        metadata: Any = None,
    ) -> ArtifactHandle:
        """Compile ``source`` and return a handle owning the produced PDF.

        Raises :class:`WorkspaceError` when the workspace cannot be prepared and
        :class:`CompilationError` when the compiler fails.
        """
        workspace = Workspace.allocate(self.config.temp_path, name_length=self.config.name_length)
        try:
            workspace.write_source(source)
        except Exception:
            workspace.cleanup()
            raise

        command = self.build_command(workspace)
        logger.debug("running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
                timeout=self.config.timeout,
            )
        except FileNotFoundError as exc:
            workspace.cleanup()
            emit_failed(self.sink, workspace.name, mode, "compiler not found", metadata)
            raise CompilationError(
                f"LaTeX compiler '{command[0]}' could not be located."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            workspace.cleanup(include_artifact=True)
            emit_failed(self.sink, workspace.name, mode, "timeout", metadata)
            raise CompilationError(
                f"LaTeX compiler timed out after {self.config.timeout} seconds."
            ) from exc
        except OSError as exc:
            workspace.cleanup()
            emit_failed(self.sink, workspace.name, mode, str(exc), metadata)
            raise CompilationError(f"Failed to invoke LaTeX compiler: {exc}") from exc

        if completed.returncode != 0:
            emit_failed(
                self.sink,
                workspace.name,
                mode,
                f"exit status {completed.returncode}",
                metadata,
            )
            raise self._failure(workspace, completed)

        workspace.cleanup()
        artifact = workspace.artifact
        if not artifact.exists():
            logger.warning("Compiler reported success but %s is missing", artifact)
        return ArtifactHandle(artifact, registry=self.registry)

    def run(self, source: str, **kwargs: Any) -> CompilationResult:
        """Like :meth:`compile` but report compiler failures as a result."""
        try:
            return CompilationResult(artifact=self.compile(source, **kwargs))
        except CompilationError as exc:
            return CompilationResult(diagnostic=exc.diagnostic)

    def _failure(
        self, workspace: Workspace, completed: subprocess.CompletedProcess[str]
    ) -> CompilationError:
        log_file = workspace.sibling(FAILURE_LOG_SUFFIX)
        if log_file.exists():
            diagnostic = log_file.read_text(encoding="utf-8", errors="replace")
        else:
            diagnostic = completed.stdout or ""

        if self.config.clean_on_failure:
            workspace.cleanup(include_artifact=True)
            remove_quietly(log_file)

        leftovers = workspace.existing()
        logger.debug(
            "compilation of %s failed with status %s", workspace.base, completed.returncode
        )
        return CompilationError(diagnostic, returncode=completed.returncode, leftovers=leftovers)


__all__ = ["FAILURE_LOG_SUFFIX", "CompilationPipeline", "CompilationResult"]
