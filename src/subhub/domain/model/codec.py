"""Translate hub resources to and from their JSON document form.

Validation and the camelCase layout live in :mod:`subhub.domain.model.schema`;
this module maps payload models onto domain objects. Encoding omits empty
optional fields; decoding failures raise ``SerializationError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from subhub.domain.errors import SerializationError

from .channel import Channel, ChannelSpec
from .deployable import Deployable, DeployableSpec, DeployableStatus, ResourceUnitStatus
from .meta import ObjectMeta, OwnerReference
from .placement import ClusterOverrides, Placement
from .schema import (
    ChannelPayload,
    ChannelSpecPayload,
    ClusterOverridesPayload,
    ClusterRefPayload,
    DeployablePayload,
    DeployableSpecPayload,
    DeployableStatusPayload,
    LabelSelectorPayload,
    LabelSelectorRequirementPayload,
    ObjectMetaPayload,
    OwnerReferencePayload,
    PackageFilterPayload,
    PackageOverridesPayload,
    PlacementPayload,
    ResourceUnitStatusPayload,
    SubscriptionPayload,
    SubscriptionPerClusterStatusPayload,
    SubscriptionSpecPayload,
    SubscriptionStatusPayload,
    SubscriptionUnitStatusPayload,
    Timestamp,
)
from .selectors import LabelSelector, LabelSelectorRequirement
from .subscription import (
    PackageFilter,
    PackageOverrides,
    Subscription,
    SubscriptionPerClusterStatus,
    SubscriptionSpec,
    SubscriptionStatus,
    SubscriptionUnitStatus,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from .meta import JsonObject

_TIMESTAMP: TypeAdapter[datetime] = TypeAdapter(Timestamp)
_DOCUMENT: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


# -- primitives ---------------------------------------------------------------


def format_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    return _TIMESTAMP.dump_python(value, mode="json")


def parse_time(value: object) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        return _TIMESTAMP.validate_python(value)
    except ValidationError as exc:
        raise SerializationError(f"invalid timestamp: {value!r}") from exc


def ensure_document(value: object) -> JsonObject:
    """Return a detached JSON-safe copy of ``value``.

    Round-tripping through JSON both proves serializability and breaks any
    aliasing with the source objects.
    """

    try:
        return _DOCUMENT.validate_json(to_json(value))
    except PydanticSerializationError as exc:
        raise SerializationError(f"payload is not serializable: {exc}") from exc
    except ValidationError as exc:
        raise SerializationError(f"expected a JSON object: {exc}") from exc


def _validate[P: BaseModel](model: type[P], payload: object) -> P:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SerializationError(f"malformed {model.__name__}: {exc}") from exc


def _dump(payload: BaseModel) -> JsonObject:
    try:
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    except PydanticSerializationError as exc:
        raise SerializationError(f"payload is not serializable: {exc}") from exc


# -- metadata ------------------------------------------------------------------


def _meta_payload(meta: ObjectMeta) -> ObjectMetaPayload:
    return ObjectMetaPayload(
        name=meta.name or None,
        namespace=meta.namespace or None,
        uid=meta.uid or None,
        resource_version=meta.resource_version or None,
        generation=meta.generation or None,
        creation_timestamp=meta.creation_timestamp or None,
        self_link=meta.self_link or None,
        labels=dict(meta.labels) or None,
        annotations=dict(meta.annotations) or None,
        owner_references=[
            OwnerReferencePayload(
                api_version=ref.api_version or None,
                kind=ref.kind or None,
                name=ref.name or None,
                uid=ref.uid or None,
                controller=ref.controller or None,
                block_owner_deletion=ref.block_owner_deletion or None,
            )
            for ref in meta.owner_references
        ]
        or None,
    )


def _meta(payload: ObjectMetaPayload) -> ObjectMeta:
    return ObjectMeta(
        name=payload.name or "",
        namespace=payload.namespace or "",
        uid=payload.uid or "",
        resource_version=payload.resource_version or "",
        generation=payload.generation or 0,
        creation_timestamp=payload.creation_timestamp,
        self_link=payload.self_link or "",
        labels=dict(payload.labels or {}),
        annotations=dict(payload.annotations or {}),
        owner_references=[
            OwnerReference(
                api_version=ref.api_version or "",
                kind=ref.kind or "",
                name=ref.name or "",
                uid=ref.uid or "",
                controller=bool(ref.controller),
                block_owner_deletion=bool(ref.block_owner_deletion),
            )
            for ref in payload.owner_references or []
        ],
    )


# -- shared spec pieces -------------------------------------------------------


def _selector_payload(selector: LabelSelector) -> LabelSelectorPayload:
    return LabelSelectorPayload(
        match_labels=dict(selector.match_labels) or None,
        match_expressions=[
            LabelSelectorRequirementPayload(
                key=requirement.key,
                operator=requirement.operator,
                values=list(requirement.values) or None,
            )
            for requirement in selector.match_expressions
        ]
        or None,
    )


def _selector(payload: LabelSelectorPayload) -> LabelSelector:
    return LabelSelector(
        match_labels=dict(payload.match_labels or {}),
        match_expressions=[
            LabelSelectorRequirement(
                key=item.key, operator=item.operator, values=list(item.values or [])
            )
            for item in payload.match_expressions or []
        ],
    )


def _placement_payload(placement: Placement) -> PlacementPayload:
    return PlacementPayload(
        local=placement.local,
        clusters=[ClusterRefPayload(name=name) for name in placement.clusters] or None,
        cluster_selector=placement.cluster_selector,
        placement_ref=placement.placement_ref,
    )


def _placement(payload: PlacementPayload) -> Placement:
    return Placement(
        local=payload.local,
        clusters=[item.name for item in payload.clusters or []],
        cluster_selector=payload.cluster_selector,
        placement_ref=payload.placement_ref,
    )


def _overrides_payload(overrides: list[ClusterOverrides]) -> list[ClusterOverridesPayload]:
    return [
        ClusterOverridesPayload(
            cluster_name=item.cluster_name,
            cluster_overrides=[dict(op) for op in item.cluster_overrides],
        )
        for item in overrides
    ]


def _overrides(items: list[ClusterOverridesPayload] | None) -> list[ClusterOverrides]:
    return [
        ClusterOverrides(cluster_name=item.cluster_name, cluster_overrides=item.cluster_overrides)
        for item in items or []
    ]


# -- subscription --------------------------------------------------------------


def _subscription_status_payload(status: SubscriptionStatus) -> SubscriptionStatusPayload:
    return SubscriptionStatusPayload(
        phase=str(status.phase) or None,
        message=status.message or None,
        reason=status.reason or None,
        last_update_time=status.last_update_time,
        statuses={
            cluster: SubscriptionPerClusterStatusPayload(
                packages={
                    name: SubscriptionUnitStatusPayload(
                        phase=unit.phase or None,
                        reason=unit.reason or None,
                        message=unit.message or None,
                        last_update_time=unit.last_update_time,
                        resource_status=unit.resource_status or None,
                    )
                    for name, unit in entry.packages.items()
                }
                or None
            )
            for cluster, entry in status.statuses.items()
        }
        or None,
    )


def _subscription_status(payload: SubscriptionStatusPayload) -> SubscriptionStatus:
    statuses: dict[str, SubscriptionPerClusterStatus] = {}
    for cluster, entry in (payload.statuses or {}).items():
        packages = entry.packages if entry is not None else None
        statuses[cluster] = SubscriptionPerClusterStatus(
            packages={
                name: SubscriptionUnitStatus(
                    phase=unit.phase or "",
                    reason=unit.reason or "",
                    message=unit.message or "",
                    last_update_time=unit.last_update_time,
                    resource_status=unit.resource_status,
                )
                for name, unit in (packages or {}).items()
            }
        )
    return SubscriptionStatus(
        phase=payload.phase or "",
        message=payload.message or "",
        reason=payload.reason or "",
        last_update_time=payload.last_update_time,
        statuses=statuses,
    )


def subscription_status_to_document(status: SubscriptionStatus) -> JsonObject:
    return _dump(_subscription_status_payload(status))


def subscription_status_from_document(doc: Mapping[str, Any]) -> SubscriptionStatus:
    return _subscription_status(_validate(SubscriptionStatusPayload, doc))


def decode_subscription_status(payload: object) -> SubscriptionStatus:
    """Decode a cluster-reported resource status as a nested subscription status.

    Agents send either a decoded document or its raw JSON text.
    """

    if isinstance(payload, bytes | bytearray):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("resource status is not valid UTF-8") from exc
    if isinstance(payload, str):
        try:
            parsed = SubscriptionStatusPayload.model_validate_json(payload)
        except ValidationError as exc:
            raise SerializationError(f"malformed resource status: {exc}") from exc
        return _subscription_status(parsed)
    return _subscription_status(_validate(SubscriptionStatusPayload, payload))


def _spec_payload(spec: SubscriptionSpec) -> SubscriptionSpecPayload:
    package_filter = spec.package_filter
    return SubscriptionSpecPayload(
        channel=spec.channel,
        package=spec.package or None,
        package_filter=(
            PackageFilterPayload(
                annotations=dict(package_filter.annotations) or None,
                label_selector=(
                    _selector_payload(package_filter.label_selector)
                    if package_filter.label_selector is not None
                    else None
                ),
                version=package_filter.version or None,
                filter_ref=package_filter.filter_ref,
            )
            if package_filter is not None
            else None
        ),
        package_overrides=[
            PackageOverridesPayload(
                package_name=item.package_name,
                package_overrides=[dict(op) for op in item.package_overrides],
            )
            for item in spec.package_overrides
        ]
        or None,
        overrides=_overrides_payload(spec.overrides) or None,
        placement=_placement_payload(spec.placement) if spec.placement is not None else None,
    )


def _spec(payload: SubscriptionSpecPayload) -> SubscriptionSpec:
    package_filter = payload.package_filter
    return SubscriptionSpec(
        channel=payload.channel,
        package=payload.package or "",
        package_filter=(
            PackageFilter(
                annotations=dict(package_filter.annotations or {}),
                label_selector=(
                    _selector(package_filter.label_selector)
                    if package_filter.label_selector is not None
                    else None
                ),
                version=package_filter.version or "",
                filter_ref=package_filter.filter_ref,
            )
            if package_filter is not None
            else None
        ),
        package_overrides=[
            PackageOverrides(package_name=item.package_name, package_overrides=item.package_overrides)
            for item in payload.package_overrides or []
        ],
        overrides=_overrides(payload.overrides),
        placement=_placement(payload.placement) if payload.placement is not None else None,
    )


def subscription_to_document(subscription: Subscription) -> JsonObject:
    status = _subscription_status_payload(subscription.status)
    payload = SubscriptionPayload(
        api_version=subscription.API_VERSION,
        kind=subscription.KIND,
        metadata=_meta_payload(subscription.metadata),
        spec=_spec_payload(subscription.spec),
        status=status if status.model_dump(exclude_none=True) else None,
    )
    return _dump(payload)


def subscription_from_document(doc: Mapping[str, Any]) -> Subscription:
    payload = _validate(SubscriptionPayload, doc)
    return Subscription(
        metadata=_meta(payload.metadata),
        spec=_spec(payload.spec),
        status=_subscription_status(payload.status or SubscriptionStatusPayload()),
    )


# -- deployable ----------------------------------------------------------------


def _deployable_status_payload(status: DeployableStatus) -> DeployableStatusPayload:
    propagated: dict[str, ResourceUnitStatusPayload] = {}
    for cluster, unit in status.propagated_status.items():
        resource_status = unit.resource_status
        if isinstance(resource_status, bytes):
            resource_status = resource_status.decode("utf-8", errors="replace")
        propagated[cluster] = ResourceUnitStatusPayload(
            phase=str(unit.phase) or None,
            reason=unit.reason or None,
            message=unit.message or None,
            last_update_time=unit.last_update_time,
            resource_status=resource_status or None,
        )
    return DeployableStatusPayload(
        phase=str(status.phase) or None,
        reason=status.reason or None,
        message=status.message or None,
        last_update_time=status.last_update_time,
        propagated_status=propagated or None,
    )


def _deployable_status(payload: DeployableStatusPayload) -> DeployableStatus:
    # resourceStatus stays opaque; the status aggregator decodes it when needed.
    return DeployableStatus(
        phase=payload.phase or "",
        reason=payload.reason or "",
        message=payload.message or "",
        last_update_time=payload.last_update_time,
        propagated_status={
            cluster: ResourceUnitStatus(
                phase=unit.phase or "",
                reason=unit.reason or "",
                message=unit.message or "",
                last_update_time=unit.last_update_time,
                resource_status=unit.resource_status,
            )
            for cluster, unit in (payload.propagated_status or {}).items()
        },
    )


def deployable_to_document(deployable: Deployable) -> JsonObject:
    spec = deployable.spec
    status = _deployable_status_payload(deployable.status)
    payload = DeployablePayload(
        api_version=deployable.API_VERSION,
        kind=deployable.KIND,
        metadata=_meta_payload(deployable.metadata),
        spec=DeployableSpecPayload(
            template=spec.template or None,
            overrides=_overrides_payload(spec.overrides) or None,
            placement=_placement_payload(spec.placement) if spec.placement is not None else None,
        ),
        status=status if status.model_dump(exclude_none=True) else None,
    )
    return _dump(payload)


def deployable_from_document(doc: Mapping[str, Any]) -> Deployable:
    payload = _validate(DeployablePayload, doc)
    spec = payload.spec
    return Deployable(
        metadata=_meta(payload.metadata),
        spec=DeployableSpec(
            template=spec.template,
            overrides=_overrides(spec.overrides),
            placement=_placement(spec.placement) if spec.placement is not None else None,
        ),
        status=_deployable_status(payload.status or DeployableStatusPayload()),
    )


# -- channel -------------------------------------------------------------------


def channel_to_document(channel: Channel) -> JsonObject:
    payload = ChannelPayload(
        api_version=channel.API_VERSION,
        kind=channel.KIND,
        metadata=_meta_payload(channel.metadata),
        spec=ChannelSpecPayload(
            type=str(channel.spec.type) or None, pathname=channel.spec.pathname or None
        ),
    )
    return _dump(payload)


def channel_from_document(doc: Mapping[str, Any]) -> Channel:
    payload = _validate(ChannelPayload, doc)
    return Channel(
        metadata=_meta(payload.metadata),
        spec=ChannelSpec(type=payload.spec.type or "", pathname=payload.spec.pathname or ""),
    )
