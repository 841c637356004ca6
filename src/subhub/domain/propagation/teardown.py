"""Withdraw a subscription's distribution when its placement is removed."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import NotFoundError
from subhub.domain.model import Deployable, ObjectKey, SubscriptionPhase, SubscriptionStatus

from .clock import Clock, utcnow
from .results import TeardownResult

if TYPE_CHECKING:
    from subhub.domain.model import Subscription
    from subhub.domain.ports import ResourceStore

log = getLogger(__name__)


def withdrawn_status(status: SubscriptionStatus) -> SubscriptionStatus:
    """Status with per-cluster entries cleared and a propagated phase reset."""

    if status.phase == SubscriptionPhase.PROPAGATED:
        return SubscriptionStatus(last_update_time=status.last_update_time)
    return SubscriptionStatus(
        phase=status.phase,
        message=status.message,
        reason=status.reason,
        last_update_time=status.last_update_time,
    )


@dataclass(slots=True)
class Teardown:
    store: ResourceStore
    clock: Clock = field(default=utcnow)

    def stop_deploying(self, subscription: Subscription) -> TeardownResult:
        """Delete owned Deployables and clear propagated status; every failure propagates."""

        result = TeardownResult()
        for name in (subscription.primary_deployable_name, subscription.target_deployable_name):
            key = ObjectKey(namespace=subscription.namespace, name=name)
            if self._delete_if_owned(subscription, key):
                result.deleted.append(key)

        cleared = withdrawn_status(subscription.status)
        if cleared.same_state(subscription.status):
            log.debug("Status of %s already withdrawn", subscription.key)
            return result

        cleared.last_update_time = self.clock()
        subscription.status = cleared
        updated = self.store.update_status(subscription)
        subscription.metadata = updated.metadata
        result.status_written = True
        log.info("Cleared propagation status of %s", subscription.key)
        return result

    def _delete_if_owned(self, subscription: Subscription, key: ObjectKey) -> bool:
        try:
            found = self.store.get(Deployable, key)
        except NotFoundError:
            return False
        if not found.metadata.is_owned_by(subscription.metadata.uid):
            log.debug("Leaving deployable %s, not owned by %s", key, subscription.key)
            return False
        log.info("Deleting deployable %s owned by %s", key, subscription.key)
        self.store.delete(found)
        return True
