"""Outcome records returned by the propagation steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subhub.domain.model import Deployable, KeySet, ObjectKey


class SoftFailureKind(StrEnum):
    CHANNEL_GENERATION = "channel-generation"
    TARGET_NOT_FOUND = "rollingupdate-target-not-found"
    STATUS_WRITE = "status-write"


@dataclass(frozen=True, slots=True)
class SoftFailure:
    """A tolerated failure: logged, reported, never raised."""

    kind: SoftFailureKind
    key: str
    error: str


class DeployableSyncAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class DeployableSync:
    action: DeployableSyncAction
    deployable: Deployable

    @property
    def mutated(self) -> bool:
        return self.action is not DeployableSyncAction.UNCHANGED


class StatusWrite(StrEnum):
    UNCHANGED = "unchanged"
    WRITTEN = "written"
    FAILED = "failed"


@dataclass(slots=True)
class TeardownResult:
    deleted: list[ObjectKey] = field(default_factory=list["ObjectKey"])
    status_written: bool = False

    @property
    def mutated(self) -> bool:
        return bool(self.deleted) or self.status_written


@dataclass(slots=True)
class ReconcileResult:
    """What one reconciliation cycle did to the store."""

    subscription: ObjectKey
    matched: KeySet | None = None
    annotation_updated: bool = False
    torn_down: TeardownResult | None = None
    primary: DeployableSync | None = None
    target: DeployableSync | None = None
    status: StatusWrite = StatusWrite.UNCHANGED
    soft_failures: list[SoftFailure] = field(default_factory=list[SoftFailure])

    @property
    def mutated(self) -> bool:
        return (
            self.annotation_updated
            or (self.torn_down is not None and self.torn_down.mutated)
            or (self.primary is not None and self.primary.mutated)
            or (self.target is not None and self.target.mutated)
            or self.status is StatusWrite.WRITTEN
        )

    def summary(self) -> str:
        parts = [f"subscription={self.subscription}"]
        if self.annotation_updated:
            parts.append("annotation=updated")
        if self.torn_down is not None:
            deleted = ",".join(str(key) for key in self.torn_down.deleted) or "-"
            parts.append(f"teardown(deleted={deleted} status={self.torn_down.status_written})")
        if self.primary is not None:
            parts.append(f"primary={self.primary.action}")
        if self.target is not None:
            parts.append(f"target={self.target.action}")
        parts.append(f"status={self.status}")
        if self.soft_failures:
            parts.append(f"soft_failures={len(self.soft_failures)}")
        return " ".join(parts)
