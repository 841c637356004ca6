"""Keep a second Deployable in sync with a subscription's rollout target."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import NotFoundError
from subhub.domain.model import ObjectKey, Subscription
from subhub.domain.model.annotations import ROLLING_UPDATE_TARGET

from .results import SoftFailure, SoftFailureKind

if TYPE_CHECKING:
    from subhub.domain.model import Deployable

    from .drift import DriftReconciler
    from .results import DeployableSync
    from .synthesis import DeployableSynthesizer

log = getLogger(__name__)


def rollout_target_key(subscription: Subscription) -> ObjectKey | None:
    name = subscription.metadata.annotations.get(ROLLING_UPDATE_TARGET, "").strip()
    if not name:
        return None
    return ObjectKey(namespace=subscription.namespace, name=name)


@dataclass(slots=True)
class RollingUpdateTargetManager:
    synthesizer: DeployableSynthesizer
    drift: DriftReconciler

    def desired_target(
        self,
        subscription: Subscription,
        soft_failures: list[SoftFailure] | None = None,
    ) -> Deployable | None:
        """Synthesize the target Deployable, or ``None`` when there is no live target.

        Fetch failures other than not-found propagate.
        """

        key = rollout_target_key(subscription)
        if key is None:
            return None
        try:
            target = self.synthesizer.store.get(Subscription, key)
        except NotFoundError as exc:
            log.info("Rolling update target %s of %s is gone", key, subscription.key)
            if soft_failures is not None:
                soft_failures.append(
                    SoftFailure(kind=SoftFailureKind.TARGET_NOT_FOUND, key=str(key), error=str(exc))
                )
            return None

        desired = self.synthesizer.synthesize(target, root=subscription, soft_failures=soft_failures)
        desired.metadata.name = subscription.target_deployable_name
        desired.metadata.namespace = subscription.namespace
        return desired

    def sync_target(
        self,
        subscription: Subscription,
        soft_failures: list[SoftFailure] | None = None,
    ) -> DeployableSync | None:
        desired = self.desired_target(subscription, soft_failures)
        if desired is None:
            return None
        return self.drift.sync(subscription, desired)
