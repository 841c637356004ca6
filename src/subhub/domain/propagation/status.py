"""Roll per-cluster Deployable results up into subscription status."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import SubscriptionHubError
from subhub.domain.model import (
    DeployablePhase,
    SubscriptionPerClusterStatus,
    SubscriptionPhase,
    SubscriptionStatus,
)
from subhub.domain.model.codec import decode_subscription_status

from .clock import Clock, utcnow
from .results import SoftFailure, SoftFailureKind, StatusWrite

if TYPE_CHECKING:
    from subhub.domain.model import Deployable, ResourceUnitStatus, Subscription
    from subhub.domain.ports import ResourceStore

log = getLogger(__name__)


def _cluster_status(unit: ResourceUnitStatus) -> SubscriptionPerClusterStatus:
    if unit.phase != DeployablePhase.DEPLOYED or unit.resource_status is None:
        return SubscriptionPerClusterStatus()
    nested = decode_subscription_status(unit.resource_status)
    entry = nested.global_entry()
    return entry if entry is not None else SubscriptionPerClusterStatus()


def aggregate_status(deployable: Deployable) -> SubscriptionStatus:
    """Recompute subscription status from ``deployable``; raises ``SerializationError``."""

    status = SubscriptionStatus(phase=SubscriptionPhase.PROPAGATED)
    if deployable.status.phase == DeployablePhase.FAILED:
        return status
    for cluster, unit in deployable.status.propagated_status.items():
        status.statuses[cluster] = _cluster_status(unit)
    return status


@dataclass(slots=True)
class StatusAggregator:
    store: ResourceStore
    clock: Clock = field(default=utcnow)

    def apply(
        self,
        subscription: Subscription,
        deployable: Deployable,
        soft_failures: list[SoftFailure] | None = None,
    ) -> StatusWrite:
        """Write the aggregated status if it differs from the stored one.

        A failed write is logged and reported as ``StatusWrite.FAILED``.
        """

        aggregated = aggregate_status(deployable)
        if aggregated.same_state(subscription.status):
            log.debug("Status of %s unchanged", subscription.key)
            return StatusWrite.UNCHANGED

        aggregated.last_update_time = self.clock()
        previous = subscription.status
        subscription.status = aggregated
        try:
            updated = self.store.update_status(subscription)
        except SubscriptionHubError as exc:
            subscription.status = previous
            log.warning("Failed to update status of hub subscription %s: %s", subscription.key, exc)
            if soft_failures is not None:
                soft_failures.append(
                    SoftFailure(
                        kind=SoftFailureKind.STATUS_WRITE,
                        key=str(subscription.key),
                        error=str(exc),
                    )
                )
            return StatusWrite.FAILED
        subscription.metadata = updated.metadata
        log.info("Updated status of %s: %d cluster(s)", subscription.key, len(aggregated.statuses))
        return StatusWrite.WRITTEN
