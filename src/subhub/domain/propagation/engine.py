"""One reconciliation cycle for a hub subscription.

Order of steps:

1. refresh the ``app.ibm.com/deployables`` bookkeeping annotation; a change
   ends the cycle because the metadata write re-triggers reconciliation
2. tear down when the subscription has no placement
3. synthesize the primary Deployable
4. synthesize and sync the rolling-update target Deployable, if annotated
5. create or update the primary Deployable
6. when the primary was already up to date, roll its cluster results up into
   the subscription status
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.model import Subscription
from subhub.domain.model.annotations import ROLLING_UPDATE_TARGET

from .catalog import refresh_deployables_annotation
from .clock import Clock, utcnow
from .drift import DriftReconciler
from .results import DeployableSyncAction, ReconcileResult
from .rolling_update import RollingUpdateTargetManager
from .status import StatusAggregator
from .synthesis import DeployableSynthesizer
from .teardown import Teardown

if TYPE_CHECKING:
    from subhub.domain.model import ObjectKey
    from subhub.domain.ports import EventRecorder, ResourceStore

log = getLogger(__name__)


@dataclass(slots=True)
class HubReconciler:
    """Drive subscriptions towards their desired distribution state.

    Holds no state between cycles. Store errors propagate to the caller, which
    is expected to re-run the whole cycle later; only the documented soft
    failures are absorbed and reported on the result.
    """

    store: ResourceStore
    recorder: EventRecorder
    clock: Clock = field(default=utcnow)

    def reconcile_key(self, key: ObjectKey) -> ReconcileResult:
        return self.reconcile(self.store.get(Subscription, key))

    def reconcile(self, subscription: Subscription) -> ReconcileResult:
        result = ReconcileResult(subscription=subscription.key)
        log.debug("Reconciling hub subscription %s", subscription.key)

        updated, matched = refresh_deployables_annotation(self.store, subscription)
        result.matched = matched
        if updated:
            result.annotation_updated = True
            return result

        if subscription.spec.placement is None:
            result.torn_down = Teardown(self.store, self.clock).stop_deploying(subscription)
            return result

        synthesizer = DeployableSynthesizer(self.store)
        drift = DriftReconciler(self.store, self.recorder)

        desired = synthesizer.synthesize(subscription, soft_failures=result.soft_failures)

        rollout = RollingUpdateTargetManager(synthesizer, drift)
        result.target = rollout.sync_target(subscription, result.soft_failures)
        if result.target is not None:
            desired.metadata.annotations[ROLLING_UPDATE_TARGET] = result.target.deployable.name

        result.primary = drift.sync(subscription, desired)
        if result.primary.action is DeployableSyncAction.UNCHANGED:
            aggregator = StatusAggregator(self.store, self.clock)
            result.status = aggregator.apply(
                subscription, result.primary.deployable, result.soft_failures
            )

        log.debug("Reconciled %s", result.summary())
        return result
