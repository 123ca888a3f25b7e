"""Public facade for rendering and delivering documents."""

from __future__ import annotations

from .document import Delivery, Document
from .views import RawTex, ViewRenderer


__all__ = ["Delivery", "Document", "RawTex", "ViewRenderer"]
