"""Port for the blob store behind object-bucket channels."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class ObjectStoreError(RuntimeError):
    """Transport or credential failure talking to the object store."""


@runtime_checkable
class ObjectStore(Protocol):
    def exists(self, bucket: str) -> None:
        """Raise ``ObjectStoreError`` unless ``bucket`` exists and is accessible."""
        ...

    def create(self, bucket: str) -> None: ...

    def list(self, bucket: str) -> list[str]: ...

    def put(self, bucket: str, name: str, content: bytes) -> None: ...

    def get(self, bucket: str, name: str) -> bytes: ...

    def delete(self, bucket: str, name: str) -> None: ...


__all__ = ["ObjectStore", "ObjectStoreError"]
