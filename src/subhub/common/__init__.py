from __future__ import annotations

from .logging import configure_logging, level_from_name
from .manifests import load_document, load_documents

__all__ = [
    "configure_logging",
    "level_from_name",
    "load_document",
    "load_documents",
]
