"""Domain port definitions for adapters."""

from __future__ import annotations

from .events import DEPLOY_REASON, EventRecorder, EventType
from .object_store import ObjectStore, ObjectStoreError
from .store import ResourceStore

__all__ = [
    "DEPLOY_REASON",
    "EventRecorder",
    "EventType",
    "ObjectStore",
    "ObjectStoreError",
    "ResourceStore",
]
