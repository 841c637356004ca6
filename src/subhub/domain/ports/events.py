"""Port for observability events attached to reconciled objects."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from subhub.domain.model import Resource


class EventType(StrEnum):
    NORMAL = "Normal"
    WARNING = "Warning"


DEPLOY_REASON = "Deploy"


@runtime_checkable
class EventRecorder(Protocol):
    def record_event(
        self,
        obj: Resource,
        reason: str,
        message: str,
        error: BaseException | None = None,
    ) -> None:
        """Record a ``Normal`` event, or a ``Warning`` one when ``error`` is set."""
        ...


__all__ = ["DEPLOY_REASON", "EventRecorder", "EventType"]
