"""Build the desired Deployable that distributes a subscription to managed clusters."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import SubscriptionHubError
from subhub.domain.model import (
    Channel,
    Deployable,
    DeployableSpec,
    ObjectMeta,
    Placement,
    Subscription,
    SubscriptionStatus,
)
from subhub.domain.model.annotations import (
    CHANNEL_GENERATION,
    SUBSCRIPTION,
    generated_deployable_annotations,
)
from subhub.domain.model.codec import ensure_document, subscription_to_document

from .overrides import merge_overrides
from .results import SoftFailure, SoftFailureKind

if TYPE_CHECKING:
    from subhub.domain.ports import ResourceStore

log = getLogger(__name__)


def template_subscription(
    subscription: Subscription,
    *,
    root: Subscription | None = None,
    channel_generation: str | None = None,
) -> Subscription:
    """Clone ``subscription`` into the form embedded in a Deployable template.

    Identity fields are stripped, placement is forced local and overrides are
    dropped; the spoke re-applies nothing that the hub already merged.
    """

    identity = root if root is not None else subscription
    source = subscription.metadata
    annotations = {SUBSCRIPTION: str(identity.key)}
    if channel_generation is not None:
        annotations[CHANNEL_GENERATION] = channel_generation

    spec = copy.deepcopy(subscription.spec)
    spec.placement = Placement(local=True)
    spec.overrides = []

    return Subscription(
        metadata=ObjectMeta(
            name=identity.name,
            namespace=source.namespace,
            generation=1,
            labels=dict(source.labels),
            annotations=annotations,
            owner_references=copy.deepcopy(source.owner_references),
        ),
        spec=spec,
        status=SubscriptionStatus(),
    )


@dataclass(slots=True)
class DeployableSynthesizer:
    """Produce desired Deployables; reads channels, never writes."""

    store: ResourceStore

    def channel_generation(
        self,
        subscription: Subscription,
        soft_failures: list[SoftFailure] | None = None,
    ) -> str | None:
        key = subscription.channel_key
        if key is None:
            return None
        try:
            channel = self.store.get(Channel, key)
        except SubscriptionHubError as exc:
            log.warning("Channel generation lookup for %s failed: %s", key, exc)
            if soft_failures is not None:
                soft_failures.append(
                    SoftFailure(
                        kind=SoftFailureKind.CHANNEL_GENERATION, key=str(key), error=str(exc)
                    )
                )
            return None
        return channel.generation_annotation

    def synthesize(
        self,
        subscription: Subscription,
        *,
        root: Subscription | None = None,
        soft_failures: list[SoftFailure] | None = None,
    ) -> Deployable:
        generation = self.channel_generation(subscription, soft_failures)
        return build_deployable(subscription, root=root, channel_generation=generation)


def build_deployable(
    subscription: Subscription,
    *,
    root: Subscription | None = None,
    channel_generation: str | None = None,
) -> Deployable:
    """Assemble the Deployable for ``subscription`` without touching any store.

    Raises ``SerializationError`` when the clone is not JSON-serializable and
    ``PatchApplicationError`` when a global override cannot be applied.
    """

    clone = template_subscription(subscription, root=root, channel_generation=channel_generation)
    template = ensure_document(subscription_to_document(clone))
    template, remaining = merge_overrides(template, subscription.spec.overrides)

    deployable = Deployable(
        metadata=ObjectMeta(
            name=subscription.primary_deployable_name,
            namespace=subscription.namespace,
            annotations=generated_deployable_annotations(),
            owner_references=[subscription.owner_reference()],
        ),
        spec=DeployableSpec(
            template=ensure_document(template),
            overrides=remaining,
            placement=copy.deepcopy(subscription.spec.placement),
        ),
    )
    log.debug("Synthesized deployable %s for subscription %s", deployable.key, subscription.key)
    return deployable
