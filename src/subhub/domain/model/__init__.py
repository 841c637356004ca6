"""Public domain model surface."""

from __future__ import annotations

from subhub.domain.model.annotations import KeySet
from subhub.domain.model.channel import Channel, ChannelSpec, ChannelType
from subhub.domain.model.deployable import (
    Deployable,
    DeployablePhase,
    DeployableSpec,
    DeployableStatus,
    ResourceUnitStatus,
)
from subhub.domain.model.meta import (
    API_GROUP,
    API_VERSION,
    JsonObject,
    ObjectKey,
    ObjectMeta,
    OwnerReference,
    Resource,
)
from subhub.domain.model.placement import GLOBAL_CLUSTER, ClusterOverrides, Placement
from subhub.domain.model.selectors import (
    LabelSelector,
    LabelSelectorRequirement,
    SelectorOperator,
)
from subhub.domain.model.subscription import (
    PackageFilter,
    PackageOverrides,
    Subscription,
    SubscriptionPerClusterStatus,
    SubscriptionPhase,
    SubscriptionSpec,
    SubscriptionStatus,
    SubscriptionUnitStatus,
)

__all__ = [  # noqa: RUF022
    # identity
    "API_GROUP",
    "API_VERSION",
    "JsonObject",
    "ObjectKey",
    "ObjectMeta",
    "OwnerReference",
    "Resource",
    # bookkeeping
    "KeySet",
    # placement and overrides
    "GLOBAL_CLUSTER",
    "ClusterOverrides",
    "Placement",
    # selectors
    "LabelSelector",
    "LabelSelectorRequirement",
    "SelectorOperator",
    # subscription
    "PackageFilter",
    "PackageOverrides",
    "Subscription",
    "SubscriptionPerClusterStatus",
    "SubscriptionPhase",
    "SubscriptionSpec",
    "SubscriptionStatus",
    "SubscriptionUnitStatus",
    # deployable
    "Deployable",
    "DeployablePhase",
    "DeployableSpec",
    "DeployableStatus",
    "ResourceUnitStatus",
    # channel
    "Channel",
    "ChannelSpec",
    "ChannelType",
]
