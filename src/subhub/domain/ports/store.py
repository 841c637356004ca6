"""Port for the external API store holding subscriptions, deployables and channels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from subhub.domain.model import LabelSelector, ObjectKey, Resource


@runtime_checkable
class ResourceStore(Protocol):
    """Get/list/create/update/delete contract with optimistic concurrency.

    Implementations raise ``NotFoundError`` for missing objects and
    ``ConflictOrTransportError`` for everything else, and must bound every call
    with a timeout.
    """

    def get[T: Resource](self, kind: type[T], key: ObjectKey) -> T: ...

    def list[T: Resource](
        self,
        kind: type[T],
        namespace: str,
        *,
        selector: LabelSelector | None = None,
    ) -> list[T]: ...

    def create[T: Resource](self, obj: T) -> T: ...

    def update[T: Resource](self, obj: T) -> T:
        """Write metadata and spec; ``metadata.resource_version`` guards the write."""
        ...

    def update_status[T: Resource](self, obj: T) -> T:
        """Write the status sub-resource only."""
        ...

    def delete(self, obj: Resource) -> None: ...


__all__ = ["ResourceStore"]
