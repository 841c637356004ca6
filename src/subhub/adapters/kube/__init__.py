"""Public interface for the API server adapter."""

from __future__ import annotations

from .client import HttpResourceStore, build_http_client, resource_path
from .events import HttpEventRecorder, event_document
from .schema import ObjectListPayload, ObjectPayload, StatusPayload
from .translator import from_document, list_from_document, to_document

__all__ = [
    "HttpEventRecorder",
    "HttpResourceStore",
    "ObjectListPayload",
    "ObjectPayload",
    "StatusPayload",
    "build_http_client",
    "event_document",
    "from_document",
    "list_from_document",
    "resource_path",
    "to_document",
]
