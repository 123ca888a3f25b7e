"""Scoped ownership of compiled artifacts.

A successful compilation hands back an :class:`ArtifactHandle`. The PDF stays
on disk until the handle is released, either explicitly, by leaving its
``with`` block, or at interpreter shutdown for handles nobody released.
Releasing is fire-once and tolerates the file being gone already (for
instance after :meth:`ArtifactHandle.move_to`).
"""

from __future__ import annotations

import atexit
import base64
import logging
from pathlib import Path
import shutil
import threading
from types import TracebackType

from .workspace import remove_quietly


logger = logging.getLogger(__name__)


class ArtifactRegistry:
    """Process-wide set of unreleased handles, released at interpreter exit."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handles: set[ArtifactHandle] = set()
        self._hooked = False

    def track(self, handle: ArtifactHandle) -> None:
        with self._lock:
            self._handles.add(handle)
            if not self._hooked:
                atexit.register(self.release_all)
                self._hooked = True

    def forget(self, handle: ArtifactHandle) -> None:
        with self._lock:
            self._handles.discard(handle)

    def pending(self) -> list[ArtifactHandle]:
        with self._lock:
            return list(self._handles)

    def release_all(self) -> None:
        for handle in self.pending():
            handle.release()


_default_registry = ArtifactRegistry()


class ArtifactHandle:
    """Owner of a compiled file; releasing it deletes the file."""

    def __init__(self, path: Path | str, *, registry: ArtifactRegistry | None = None) -> None:
        self.path = Path(path)
        self._registry = registry if registry is not None else _default_registry
        self._lock = threading.Lock()
        self._released = False
        self._registry.track(self)

    @property
    def released(self) -> bool:
        return self._released

    @property
    def name(self) -> str:
        return self.path.name

    def exists(self) -> bool:
        return self.path.exists()

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def read_base64(self, *, line_length: int = 76) -> str:
        """Return the file encoded as base64, split into CRLF-terminated lines."""
        encoded = base64.b64encode(self.read_bytes()).decode("ascii")
        return "".join(
            f"{encoded[index : index + line_length]}\r\n"
            for index in range(0, len(encoded), line_length)
        )

    def move_to(self, destination: Path | str) -> Path:
        """Move the artifact to ``destination`` and return the new path."""
        target = Path(destination)
        moved = Path(shutil.move(str(self.path), str(target)))
        logger.debug("moved artifact %s to %s", self.path, moved)
        return moved

    def release(self) -> None:
        """Delete the artifact if still present. Safe to call repeatedly."""
        with self._lock:
            if self._released:
                return
            self._released = True
        self._registry.forget(self)
        if remove_quietly(self.path):
            logger.debug("released artifact %s", self.path)

    def __enter__(self) -> ArtifactHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()

    def __fspath__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        state = "released" if self._released else "held"
        return f"ArtifactHandle({str(self.path)!r}, {state})"


__all__ = ["ArtifactHandle", "ArtifactRegistry"]
