"""Bookkeeping of the catalog Deployables a subscription currently matches."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import FilterEvaluationError
from subhub.domain.model import Deployable, KeySet
from subhub.domain.model.annotations import DEPLOYABLES

from .package_filter import PackageFilterEvaluator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from subhub.domain.model import Subscription
    from subhub.domain.ports import ResourceStore

log = getLogger(__name__)


def filter_catalog(subscription: Subscription, artifacts: Iterable[Deployable]) -> KeySet:
    """Keys of the ``artifacts`` accepted by the subscription's package filter."""

    evaluator = PackageFilterEvaluator.for_subscription(subscription)
    return KeySet.of(str(artifact.key) for artifact in artifacts if evaluator.matches(artifact))


def match_catalog(store: ResourceStore, subscription: Subscription) -> KeySet:
    """List the channel namespace and return the matched ``namespace/name`` keys.

    Raises ``FilterEvaluationError`` for a malformed label selector.
    """

    package_filter = subscription.spec.package_filter
    selector = package_filter.label_selector if package_filter is not None else None
    if selector is not None:
        selector.validate()
        if selector.is_empty:
            selector = None

    namespace = subscription.channel_namespace
    artifacts = store.list(Deployable, namespace, selector=selector)
    log.debug("Found %d catalog deployables in %s for %s", len(artifacts), namespace, subscription.key)
    return filter_catalog(subscription, artifacts)


def refresh_deployables_annotation(
    store: ResourceStore, subscription: Subscription
) -> tuple[bool, KeySet | None]:
    """Rewrite the bookkeeping annotation when the matched set changed.

    Returns ``(updated, matched)``. A malformed selector leaves the annotation
    untouched and yields ``(False, None)``; a failed metadata update propagates.
    """

    try:
        matched = match_catalog(store, subscription)
    except FilterEvaluationError as exc:
        log.warning("Skipping deployable bookkeeping for %s: %s", subscription.key, exc)
        return False, None

    annotations = subscription.metadata.annotations
    recorded = KeySet.parse(annotations.get(DEPLOYABLES))
    if matched == recorded:
        log.debug("Deployable set unchanged for %s", subscription.key)
        return False, matched

    log.info(
        "Deployables for %s changed: added=%s removed=%s",
        subscription.key,
        sorted(matched.added_since(recorded)),
        sorted(matched.removed_since(recorded)),
    )
    annotations[DEPLOYABLES] = matched.encode()
    updated = store.update(subscription)
    subscription.metadata = updated.metadata
    return True, matched
