"""Configuration model shared by the compilation pipeline and the document facade.

CompilerConfig

`bin_path` (`str | None`)
: LaTeX compiler executable. Leave empty to use `pdflatex` from `PATH`.

`temp_path` (`Path`)
: Directory holding the per-compilation workspace files. Defaults to the
  system temporary directory.

`views_path` (`Path | None`)
: Root directory of the LaTeX view templates rendered by
  :class:`texbake.api.views.ViewRenderer`.

`name_length` (`int`)
: Length of the random base name given to every workspace. Shorter names are
  rejected to keep concurrent compilations from colliding.

`timeout` (`float | None`)
: Seconds after which the compiler process is killed. No timeout is applied
  unless one is configured.

`clean_on_failure` (`bool`)
: Remove the auxiliary files left by a failed compilation. They are kept by
  default so the compiler log can still be inspected.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import tempfile
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml


DEFAULT_COMPILER = "pdflatex"
MIN_NAME_LENGTH = 10


class CompilerConfig(BaseModel):
    """Explicit settings for LaTeX compilation."""

    model_config = ConfigDict(extra="forbid")

    bin_path: str | None = None
    temp_path: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    views_path: Path | None = None
    name_length: int = Field(default=MIN_NAME_LENGTH, ge=MIN_NAME_LENGTH)
    timeout: float | None = Field(default=None, gt=0)
    clean_on_failure: bool = False

    @field_validator("bin_path")
    @classmethod
    def _blank_is_default(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def compiler_program(self) -> str:
        """Return the executable used to compile sources."""
        return self.bin_path or DEFAULT_COMPILER


def load_config(path: Path | str | None, **overrides: Any) -> CompilerConfig:
    """Load a :class:`CompilerConfig` from a YAML file.

    A top-level ``texbake`` key is unwrapped when present. Missing files yield
    the defaults; keyword overrides that are not ``None`` win over file values.
    """
    payload: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
            if not isinstance(raw, Mapping):
                msg = f"Configuration file '{config_path}' must contain a mapping."
                raise ValueError(msg)
            section = raw.get("texbake", raw)
            if isinstance(section, Mapping):
                payload.update(section)
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return CompilerConfig.model_validate(payload)


__all__ = ["DEFAULT_COMPILER", "MIN_NAME_LENGTH", "CompilerConfig", "load_config"]
