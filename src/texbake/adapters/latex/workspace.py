"""Per-compilation workspace files living in the shared temporary directory.

Each compilation gets a random base name; the source file is written to
``<base>`` (no extension) and the compiler drops ``<base>.pdf``,
``<base>.aux``, ``<base>.log`` and ``<base>.out`` next to it. Concurrent
compilations share the directory without locking and rely on the base names
never colliding.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import re
import secrets
import string
import tempfile

from texbake.core.config import MIN_NAME_LENGTH
from texbake.core.exceptions import WorkspaceError


logger = logging.getLogger(__name__)

NAME_ALPHABET = string.ascii_letters + string.digits
WORKSPACE_MODE = 0o755
SECONDARY_SUFFIXES = (".aux", ".log", ".out")
ARTIFACT_SUFFIX = ".pdf"

_TEMP_EXTENSION = re.compile(r"\.[^.\s]{3,4}$")


def random_name(length: int = MIN_NAME_LENGTH) -> str:
    """Return an unpredictable alphanumeric token of ``length`` characters."""
    if length < MIN_NAME_LENGTH:
        msg = f"Workspace names need at least {MIN_NAME_LENGTH} characters."
        raise ValueError(msg)
    return "".join(secrets.choice(NAME_ALPHABET) for _ in range(length))


def strip_temp_extension(path: Path) -> Path:
    """Drop a three or four character extension appended by the temp facility."""
    return path.with_name(_TEMP_EXTENSION.sub("", path.name))


def remove_quietly(path: Path) -> bool:
    """Delete ``path`` when present; return ``True`` when a file was removed.

    Missing files count as already clean and other failures are logged, never
    raised.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Unable to remove workspace file %s: %s", path, exc)
        return False
    return True


@dataclass(frozen=True, slots=True)
class Workspace:
    """Files belonging to a single compilation."""

    directory: Path
    base: Path
    name: str

    @classmethod
    def allocate(cls, directory: Path | str, *, name_length: int = MIN_NAME_LENGTH) -> Workspace:
        """Create the empty source file for a new compilation."""
        directory = Path(directory)
        name = random_name(name_length)
        try:
            handle, raw_path = tempfile.mkstemp(prefix=name, dir=directory)
        except OSError as exc:
            raise WorkspaceError(
                f"Unable to create a temporary file in '{directory}': {exc}"
            ) from exc
        os.close(handle)

        created = Path(raw_path)
        base = strip_temp_extension(created)
        if base != created:
            if base.exists():
                remove_quietly(created)
                raise WorkspaceError(f"Workspace file '{base}' already exists.")
            try:
                created.rename(base)
            except OSError as exc:
                remove_quietly(created)
                raise WorkspaceError(f"Unable to rename '{created}' to '{base}': {exc}") from exc

        try:
            base.chmod(WORKSPACE_MODE)
        except OSError as exc:
            remove_quietly(base)
            raise WorkspaceError(f"Unable to set permissions on '{base}': {exc}") from exc

        logger.debug("allocated workspace %s", base)
        return cls(directory=directory, base=base, name=name)

    def sibling(self, suffix: str) -> Path:
        """Return ``<base><suffix>``, concatenated verbatim."""
        return Path(f"{self.base}{suffix}")

    @property
    def artifact(self) -> Path:
        return self.sibling(ARTIFACT_SUFFIX)

    @property
    def secondary_files(self) -> tuple[Path, ...]:
        return (self.base, *(self.sibling(suffix) for suffix in SECONDARY_SUFFIXES))

    def write_source(self, source: str) -> None:
        try:
            self.base.write_text(source, encoding="utf-8")
        except OSError as exc:
            raise WorkspaceError(f"Unable to write source to '{self.base}': {exc}") from exc

    def existing(self, paths: Iterable[Path] | None = None) -> list[Path]:
        """Return the workspace files currently on disk."""
        candidates = paths if paths is not None else (*self.secondary_files, self.artifact)
        return [path for path in candidates if path.exists()]

    def cleanup(self, *, include_artifact: bool = False) -> list[Path]:
        """Remove the source and auxiliary files; return the removed paths."""
        targets = list(self.secondary_files)
        if include_artifact:
            targets.append(self.artifact)
        return [path for path in targets if remove_quietly(path)]


__all__ = [
    "ARTIFACT_SUFFIX",
    "NAME_ALPHABET",
    "SECONDARY_SUFFIXES",
    "WORKSPACE_MODE",
    "Workspace",
    "random_name",
    "remove_quietly",
    "strip_temp_extension",
]
