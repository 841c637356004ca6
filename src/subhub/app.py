"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from subhub.adapters.kube import HttpEventRecorder, HttpResourceStore, build_http_client
from subhub.common.manifests import load_document, load_documents
from subhub.config import HubConfig
from subhub.domain.model import Deployable, Subscription
from subhub.domain.model.codec import (
    deployable_from_document,
    deployable_to_document,
    subscription_from_document,
)
from subhub.domain.propagation import HubReconciler, build_deployable, filter_catalog

if TYPE_CHECKING:
    from pathlib import Path

    from subhub.domain.model import JsonObject, KeySet, ObjectKey
    from subhub.domain.ports import EventRecorder, ResourceStore
    from subhub.domain.propagation import ReconcileResult


log = getLogger(__name__)


def reconcile_subscription(
    key: ObjectKey,
    *,
    store: ResourceStore | None = None,
    recorder: EventRecorder | None = None,
    config: HubConfig | None = None,
) -> ReconcileResult:
    """Run one reconciliation cycle for ``key`` against the configured API server.

    Pass both ``store`` and ``recorder`` to reconcile against injected
    collaborators; passing only one of them is rejected.
    """

    if (store is None) != (recorder is None):
        raise ValueError("store and recorder must be injected together")
    if store is not None and recorder is not None:
        return HubReconciler(store, recorder).reconcile_key(key)

    effective_config = config or HubConfig.from_environment()
    client = build_http_client(effective_config)
    with HttpResourceStore(config=effective_config, client=client) as http_store:
        reconciler = HubReconciler(
            http_store,
            HttpEventRecorder(client, component=effective_config.component),
        )
        log.info("Reconciling %s against %s", key, effective_config.api_server)
        result = reconciler.reconcile_key(key)
    log.info("Finished reconciling: %s", result.summary())
    return result


def render_deployable(
    subscription_path: str | Path,
    *,
    channel_generation: int | None = None,
) -> JsonObject:
    """Synthesize the primary Deployable for a Subscription manifest, offline."""

    subscription = subscription_from_document(load_document(subscription_path))
    generation = str(channel_generation) if channel_generation is not None else None
    deployable = build_deployable(subscription, channel_generation=generation)
    return deployable_to_document(deployable)


def load_catalog(path: str | Path) -> list[Deployable]:
    return [
        deployable_from_document(document)
        for document in load_documents(path)
        if document.get("kind", Deployable.KIND) == Deployable.KIND
    ]


def match_catalog_file(subscription_path: str | Path, catalog_path: str | Path) -> KeySet:
    """Evaluate a subscription's filter against catalog Deployables read from a file.

    The label selector, normally applied by the API server when listing, is
    applied here in memory. Only Deployables in the channel namespace count.
    """

    subscription: Subscription = subscription_from_document(load_document(subscription_path))
    namespace = subscription.channel_namespace
    candidates = [item for item in load_catalog(catalog_path) if item.namespace == namespace]

    package_filter = subscription.spec.package_filter
    selector = package_filter.label_selector if package_filter is not None else None
    if selector is not None:
        selector.validate()
        candidates = [item for item in candidates if selector.matches(item.metadata.labels)]

    matched = filter_catalog(subscription, candidates)
    log.info("Matched %d of %d catalog deployable(s)", len(matched), len(candidates))
    return matched
