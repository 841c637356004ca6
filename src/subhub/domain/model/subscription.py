"""Subscription resource: selection intent plus aggregated propagation status."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .meta import ObjectKey, Resource
from .placement import GLOBAL_CLUSTER, ClusterOverrides, Placement

if TYPE_CHECKING:
    from datetime import datetime

    from .meta import JsonObject
    from .selectors import LabelSelector


class SubscriptionPhase(StrEnum):
    UNSET = ""
    PROPAGATED = "Propagated"
    SUBSCRIBED = "Subscribed"
    FAILED = "Failed"


@dataclass(slots=True, kw_only=True)
class PackageFilter:
    annotations: dict[str, str] = field(default_factory=dict[str, str])
    label_selector: LabelSelector | None = None
    version: str = ""
    filter_ref: JsonObject | None = None


@dataclass(slots=True, kw_only=True)
class PackageOverrides:
    package_name: str
    package_overrides: list[JsonObject] = field(default_factory=list["JsonObject"])


@dataclass(slots=True, kw_only=True)
class SubscriptionSpec:
    channel: str
    package: str = ""
    package_filter: PackageFilter | None = None
    package_overrides: list[PackageOverrides] = field(default_factory=list[PackageOverrides])
    overrides: list[ClusterOverrides] = field(default_factory=list[ClusterOverrides])
    placement: Placement | None = None


@dataclass(slots=True, kw_only=True)
class SubscriptionUnitStatus:
    """Status of one package on one cluster, as reported by the spoke."""

    phase: str = ""
    reason: str = ""
    message: str = ""
    last_update_time: datetime | None = None
    resource_status: JsonObject | None = None


@dataclass(slots=True, kw_only=True)
class SubscriptionPerClusterStatus:
    packages: dict[str, SubscriptionUnitStatus] = field(
        default_factory=dict[str, SubscriptionUnitStatus]
    )


@dataclass(slots=True, kw_only=True)
class SubscriptionStatus:
    phase: str = SubscriptionPhase.UNSET
    message: str = ""
    reason: str = ""
    last_update_time: datetime | None = None
    statuses: dict[str, SubscriptionPerClusterStatus] = field(
        default_factory=dict[str, SubscriptionPerClusterStatus]
    )

    def same_state(self, other: SubscriptionStatus) -> bool:
        """Structural equality ignoring ``last_update_time``."""

        return (
            self.phase == other.phase
            and self.message == other.message
            and self.reason == other.reason
            and self.statuses == other.statuses
        )

    def global_entry(self) -> SubscriptionPerClusterStatus | None:
        """Entry a spoke records under ``"/"`` for its local view of the subscription."""

        return self.statuses.get(GLOBAL_CLUSTER)


@dataclass(slots=True, kw_only=True)
class Subscription(Resource):
    KIND = "Subscription"
    PLURAL = "subscriptions"

    spec: SubscriptionSpec
    status: SubscriptionStatus = field(default_factory=SubscriptionStatus)

    @property
    def channel_key(self) -> ObjectKey | None:
        if not self.spec.channel:
            return None
        return ObjectKey.parse(self.spec.channel, default_namespace=self.metadata.namespace)

    @property
    def channel_namespace(self) -> str:
        key = self.channel_key
        return key.namespace if key is not None else self.metadata.namespace

    @property
    def primary_deployable_name(self) -> str:
        return f"{self.metadata.name}-deployable"

    @property
    def target_deployable_name(self) -> str:
        return f"{self.metadata.name}-target-deployable"
