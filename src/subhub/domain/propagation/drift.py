"""Create or update a Deployable so that it matches its desired state."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import NotFoundError, SubscriptionHubError
from subhub.domain.model import Deployable
from subhub.domain.model.annotations import ROLLING_UPDATE_TARGET, generated_deployable_annotations
from subhub.domain.ports import DEPLOY_REASON

from .results import DeployableSync, DeployableSyncAction

if TYPE_CHECKING:
    from collections.abc import Callable

    from subhub.domain.model import Subscription
    from subhub.domain.ports import EventRecorder, ResourceStore

log = getLogger(__name__)


def has_drifted(desired: Deployable, found: Deployable) -> bool:
    """Structural comparison of template, per-cluster overrides and rollout target."""

    return (
        desired.spec.template != found.spec.template
        or desired.spec.overrides != found.spec.overrides
        or desired.metadata.annotations.get(ROLLING_UPDATE_TARGET)
        != found.metadata.annotations.get(ROLLING_UPDATE_TARGET)
    )


@dataclass(slots=True)
class DriftReconciler:
    store: ResourceStore
    recorder: EventRecorder

    def sync(self, owner: Subscription, desired: Deployable) -> DeployableSync:
        """Create ``desired`` if missing, update it if drifted, else leave it alone.

        Store failures propagate after a Deploy event has been recorded on
        ``owner`` for the create or update attempt.
        """

        key = desired.key
        try:
            found = self.store.get(Deployable, key)
        except NotFoundError:
            log.info("Creating deployable %s", key)
            created = self._write(
                owner,
                lambda: self.store.create(desired),
                f"Deployable {key} created in the subscription namespace "
                "for deploying the subscription to managed clusters",
            )
            return DeployableSync(action=DeployableSyncAction.CREATED, deployable=created)

        if not has_drifted(desired, found):
            log.debug("Deployable %s is up to date", key)
            return DeployableSync(action=DeployableSyncAction.UNCHANGED, deployable=found)

        found.spec = copy.deepcopy(desired.spec)
        found.metadata.annotations.update(desired.metadata.annotations)
        found.metadata.annotations.update(generated_deployable_annotations())
        if ROLLING_UPDATE_TARGET not in desired.metadata.annotations:
            found.metadata.annotations.pop(ROLLING_UPDATE_TARGET, None)
        log.info("Updating deployable %s", key)
        updated = self._write(
            owner,
            lambda: self.store.update(found),
            f"Deployable {key} updated in the subscription namespace "
            "for deploying the subscription to managed clusters",
        )
        return DeployableSync(action=DeployableSyncAction.UPDATED, deployable=updated)

    def _write(
        self, owner: Subscription, write: Callable[[], Deployable], message: str
    ) -> Deployable:
        try:
            result = write()
        except SubscriptionHubError as exc:
            self.recorder.record_event(owner, DEPLOY_REASON, message, exc)
            raise
        self.recorder.record_event(owner, DEPLOY_REASON, message)
        return result
