"""Pydantic models for the wire form of hub resources.

Field names follow the API server's camelCase layout through aliases. Optional
fields default to ``None`` so ``model_dump(exclude_none=True)`` leaves them out.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, Self, cast

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _to_utc_seconds(value: datetime) -> datetime:
    # the API server stores second precision; finer input would never compare equal
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).replace(microsecond=0)


def _format_timestamp(value: datetime) -> str:
    return _to_utc_seconds(value).strftime(_TIME_FORMAT)


Timestamp = Annotated[
    datetime,
    AfterValidator(_to_utc_seconds),
    PlainSerializer(_format_timestamp, return_type=str, when_used="json"),
]


class ResourceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# -- metadata ------------------------------------------------------------------


class OwnerReferencePayload(ResourceBaseModel):
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    name: str | None = None
    uid: str | None = None
    controller: bool | None = None
    block_owner_deletion: bool | None = Field(default=None, alias="blockOwnerDeletion")


class ObjectMetaPayload(ResourceBaseModel):
    name: str | None = None
    namespace: str | None = None
    uid: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    generation: int | None = None
    creation_timestamp: str | None = Field(default=None, alias="creationTimestamp")
    self_link: str | None = Field(default=None, alias="selfLink")
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    owner_references: list[OwnerReferencePayload] | None = Field(
        default=None, alias="ownerReferences"
    )

    @field_validator("creation_timestamp", mode="before")
    @classmethod
    def _keep_timestamp_text(cls, value: object) -> object:
        # YAML manifests decode unquoted timestamps into datetimes
        if isinstance(value, datetime):
            return _format_timestamp(value)
        return value


# -- shared spec pieces -------------------------------------------------------


class LabelSelectorRequirementPayload(ResourceBaseModel):
    key: str = ""
    operator: str = ""
    values: list[str] | None = None

    @field_validator("values", mode="before")
    @classmethod
    def _stringify_values(cls, value: object) -> object:
        if isinstance(value, list):
            return [str(item) for item in cast(list[object], value)]
        return value


class LabelSelectorPayload(ResourceBaseModel):
    match_labels: dict[str, str] | None = Field(default=None, alias="matchLabels")
    match_expressions: list[LabelSelectorRequirementPayload] | None = Field(
        default=None, alias="matchExpressions"
    )


class ClusterRefPayload(ResourceBaseModel):
    name: str = ""


class PlacementPayload(ResourceBaseModel):
    local: bool | None = None
    clusters: list[ClusterRefPayload] | None = None
    cluster_selector: dict[str, Any] | None = Field(default=None, alias="clusterSelector")
    placement_ref: dict[str, Any] | None = Field(default=None, alias="placementRef")


class ClusterOverridesPayload(ResourceBaseModel):
    cluster_name: str = Field(default="", alias="clusterName")
    cluster_overrides: list[dict[str, Any]] = Field(
        default_factory=list[dict[str, Any]], alias="clusterOverrides"
    )


# -- subscription --------------------------------------------------------------


class PackageFilterPayload(ResourceBaseModel):
    annotations: dict[str, str] | None = None
    label_selector: LabelSelectorPayload | None = Field(default=None, alias="labelSelector")
    version: str | None = None
    filter_ref: dict[str, Any] | None = Field(default=None, alias="filterRef")


class PackageOverridesPayload(ResourceBaseModel):
    package_name: str = Field(default="", alias="packageName")
    package_overrides: list[dict[str, Any]] = Field(
        default_factory=list[dict[str, Any]], alias="packageOverrides"
    )


class SubscriptionSpecPayload(ResourceBaseModel):
    channel: str = ""
    package: str | None = Field(default=None, alias="name")
    package_filter: PackageFilterPayload | None = Field(default=None, alias="packageFilter")
    package_overrides: list[PackageOverridesPayload] | None = Field(
        default=None, alias="packageOverrides"
    )
    overrides: list[ClusterOverridesPayload] | None = None
    placement: PlacementPayload | None = None


class SubscriptionUnitStatusPayload(ResourceBaseModel):
    phase: str | None = None
    reason: str | None = None
    message: str | None = None
    last_update_time: Timestamp | None = Field(default=None, alias="lastUpdateTime")
    resource_status: dict[str, Any] | None = Field(default=None, alias="resourceStatus")


class SubscriptionPerClusterStatusPayload(ResourceBaseModel):
    packages: dict[str, SubscriptionUnitStatusPayload] | None = None


class SubscriptionStatusPayload(ResourceBaseModel):
    phase: str | None = None
    message: str | None = None
    reason: str | None = None
    last_update_time: Timestamp | None = Field(default=None, alias="lastUpdateTime")
    statuses: dict[str, SubscriptionPerClusterStatusPayload | None] | None = None


# -- deployable ----------------------------------------------------------------


class ResourceUnitStatusPayload(ResourceBaseModel):
    phase: str | None = None
    reason: str | None = None
    message: str | None = None
    last_update_time: Timestamp | None = Field(default=None, alias="lastUpdateTime")
    resource_status: dict[str, Any] | str | None = Field(default=None, alias="resourceStatus")


class DeployableStatusPayload(ResourceBaseModel):
    phase: str | None = None
    reason: str | None = None
    message: str | None = None
    last_update_time: Timestamp | None = Field(default=None, alias="lastUpdateTime")
    propagated_status: dict[str, ResourceUnitStatusPayload] | None = Field(
        default=None, alias="propagatedStatus"
    )


class DeployableSpecPayload(ResourceBaseModel):
    template: dict[str, Any] | None = None
    overrides: list[ClusterOverridesPayload] | None = None
    placement: PlacementPayload | None = None


# -- channel -------------------------------------------------------------------


class ChannelSpecPayload(ResourceBaseModel):
    type: str | None = None
    pathname: str | None = None


# -- resources -----------------------------------------------------------------


class ResourcePayload(ResourceBaseModel):
    KIND: ClassVar[str] = ""

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ObjectMetaPayload = Field(default_factory=ObjectMetaPayload)

    @model_validator(mode="before")
    @classmethod
    def _drop_null_sections(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping = cast(Mapping[str, object], value)
            return {key: item for key, item in mapping.items() if item is not None}
        return value

    @model_validator(mode="after")
    def _check_kind(self) -> Self:
        if self.kind is not None and self.kind != self.KIND:
            raise ValueError(f"expected kind {self.KIND}, got {self.kind!r}")
        return self


class SubscriptionPayload(ResourcePayload):
    KIND: ClassVar[str] = "Subscription"

    spec: SubscriptionSpecPayload = Field(default_factory=SubscriptionSpecPayload)
    status: SubscriptionStatusPayload | None = None


class DeployablePayload(ResourcePayload):
    KIND: ClassVar[str] = "Deployable"

    spec: DeployableSpecPayload = Field(default_factory=DeployableSpecPayload)
    status: DeployableStatusPayload | None = None


class ChannelPayload(ResourcePayload):
    KIND: ClassVar[str] = "Channel"

    spec: ChannelSpecPayload = Field(default_factory=ChannelSpecPayload)
