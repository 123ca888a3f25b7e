"""Command implementations for the texbake CLI."""

from __future__ import annotations

from .build import build, dry_run
from .convert import convert


__all__ = ["build", "convert", "dry_run"]
