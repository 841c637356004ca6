from __future__ import annotations

from datetime import UTC, datetime

import pytest

from subhub.domain.errors import NotFoundError, PatchApplicationError
from subhub.domain.model import (
    ClusterOverrides,
    Deployable,
    ObjectKey,
    Subscription,
    SubscriptionPhase,
)
from subhub.domain.model.annotations import DEPLOYABLES, ROLLING_UPDATE_TARGET
from subhub.domain.propagation import (
    DeployableSyncAction,
    HubReconciler,
    SoftFailureKind,
    StatusWrite,
    build_deployable,
)

from tests.helpers.resources import (
    deployed_unit,
    make_catalog_deployable,
    make_channel,
    make_subscription,
    nested_status,
    placed,
)
from tests.helpers.store import FakeEventRecorder, FakeResourceStore, transport_error

NOW = datetime(2024, 6, 3, 9, 0, tzinfo=UTC)
SUB_KEY = ObjectKey(namespace="default", name="demo")
PRIMARY = ObjectKey(namespace="default", name="demo-deployable")
TARGET = ObjectKey(namespace="default", name="demo-target-deployable")


def _clock() -> datetime:
    return NOW


def _settled_store(subscription: Subscription) -> FakeResourceStore:
    subscription.metadata.annotations.setdefault(DEPLOYABLES, "ch-ns/nginx")
    return FakeResourceStore(
        subscription,
        make_channel(),
        make_catalog_deployable("nginx", version="1.0.0"),
    )


def _reconciler(store: FakeResourceStore) -> HubReconciler:
    return HubReconciler(store, FakeEventRecorder(), _clock)


def test_annotation_change_ends_the_cycle() -> None:
    store = FakeResourceStore(
        make_subscription(placement=placed()),
        make_catalog_deployable("nginx"),
    )

    result = _reconciler(store).reconcile_key(SUB_KEY)

    assert result.annotation_updated
    assert result.primary is None
    assert [call.verb for call in store.mutating_calls] == ["update"]
    assert store.peek(Deployable, PRIMARY) is None


def test_cycles_converge_and_then_stop_writing() -> None:
    store = FakeResourceStore(
        make_subscription(placement=placed()),
        make_channel(),
        make_catalog_deployable("nginx", version="1.0.0"),
    )
    reconciler = _reconciler(store)

    first = reconciler.reconcile_key(SUB_KEY)
    second = reconciler.reconcile_key(SUB_KEY)
    third = reconciler.reconcile_key(SUB_KEY)

    assert first.annotation_updated
    assert second.primary is not None
    assert second.primary.action is DeployableSyncAction.CREATED
    assert third.status is StatusWrite.WRITTEN

    before = store.peek(Deployable, PRIMARY)
    store.calls.clear()
    fourth = reconciler.reconcile_key(SUB_KEY)
    after = store.peek(Deployable, PRIMARY)

    assert not fourth.mutated
    assert store.mutating_calls == []
    assert before is not None
    assert after is not None
    assert after.spec.template == before.spec.template
    assert after.spec.overrides == before.spec.overrides


def test_bookkeeping_annotation_equals_matched_set() -> None:
    store = FakeResourceStore(
        make_subscription(placement=placed()),
        make_catalog_deployable("b"),
        make_catalog_deployable("a"),
    )

    result = _reconciler(store).reconcile_key(SUB_KEY)

    stored = store.peek(Subscription, SUB_KEY)
    assert stored is not None
    assert result.matched is not None
    assert stored.metadata.annotations[DEPLOYABLES] == result.matched.encode() == "ch-ns/a,ch-ns/b"


def test_no_placement_tears_down() -> None:
    subscription = make_subscription()
    store = _settled_store(subscription)
    owned = make_subscription(placement=placed())
    store.seed(build_deployable(owned))

    result = _reconciler(store).reconcile_key(SUB_KEY)

    assert result.torn_down is not None
    assert result.torn_down.deleted == [PRIMARY]
    assert result.primary is None


def test_global_override_reaches_stored_template() -> None:
    subscription = make_subscription(
        placement=placed(),
        overrides=[
            ClusterOverrides(
                cluster_name="/", cluster_overrides=[{"path": "spec.name", "value": "nginx"}]
            ),
            ClusterOverrides(
                cluster_name="clusterA",
                cluster_overrides=[{"path": "spec.name", "value": "redis"}],
            ),
        ],
    )
    store = _settled_store(subscription)

    _reconciler(store).reconcile_key(SUB_KEY)

    stored = store.peek(Deployable, PRIMARY)
    assert stored is not None
    assert stored.spec.template is not None
    assert stored.spec.template["spec"]["name"] == "nginx"
    assert [entry.cluster_name for entry in stored.spec.overrides] == ["clusterA"]


def test_rolling_update_creates_target_and_annotates_primary() -> None:
    subscription = make_subscription(
        placement=placed(), annotations={ROLLING_UPDATE_TARGET: "demo-v2"}
    )
    store = _settled_store(subscription)
    store.seed(make_subscription("demo-v2", uid="v2-uid", package="nginx", placement=placed()))

    result = _reconciler(store).reconcile_key(SUB_KEY)

    assert result.target is not None
    assert result.target.action is DeployableSyncAction.CREATED
    primary = store.peek(Deployable, PRIMARY)
    target = store.peek(Deployable, TARGET)
    assert primary is not None
    assert target is not None
    assert primary.metadata.annotations[ROLLING_UPDATE_TARGET] == "demo-target-deployable"
    assert target.spec.template is not None
    assert target.spec.template["spec"]["name"] == "nginx"


def test_retired_rollout_target_is_silent() -> None:
    subscription = make_subscription(
        placement=placed(), annotations={ROLLING_UPDATE_TARGET: "demo-v2"}
    )
    store = _settled_store(subscription)
    target = make_subscription("demo-v2", uid="v2-uid", placement=placed())
    store.seed(target)
    reconciler = _reconciler(store)
    reconciler.reconcile_key(SUB_KEY)
    store.delete(target)
    store.calls.clear()

    result = reconciler.reconcile_key(SUB_KEY)

    assert result.target is None
    assert [failure.kind for failure in result.soft_failures] == [
        SoftFailureKind.TARGET_NOT_FOUND
    ]
    assert all(call.key != TARGET for call in store.mutating_calls)
    primary = store.peek(Deployable, PRIMARY)
    assert primary is not None
    assert ROLLING_UPDATE_TARGET not in primary.metadata.annotations


def test_unchanged_primary_rolls_status_up() -> None:
    subscription = make_subscription(placement=placed())
    store = _settled_store(subscription)
    reconciler = _reconciler(store)
    reconciler.reconcile_key(SUB_KEY)
    deployed = store.peek(Deployable, PRIMARY)
    assert deployed is not None
    deployed.status.propagated_status = {
        "clusterA": deployed_unit(nested_status({"nginx": {"phase": "Subscribed"}}))
    }
    store.seed(deployed)

    result = reconciler.reconcile_key(SUB_KEY)

    assert result.status is StatusWrite.WRITTEN
    stored = store.peek(Subscription, SUB_KEY)
    assert stored is not None
    assert stored.status.phase == SubscriptionPhase.PROPAGATED
    assert stored.status.last_update_time == NOW
    assert stored.status.statuses["clusterA"].packages["nginx"].phase == "Subscribed"


def test_status_write_failure_is_reported_not_raised() -> None:
    subscription = make_subscription(placement=placed())
    store = _settled_store(subscription)
    reconciler = _reconciler(store)
    reconciler.reconcile_key(SUB_KEY)
    store.fail("update_status", Subscription, SUB_KEY, transport_error())

    result = reconciler.reconcile_key(SUB_KEY)

    assert result.status is StatusWrite.FAILED
    assert [failure.kind for failure in result.soft_failures] == [SoftFailureKind.STATUS_WRITE]


def test_patch_failure_aborts_cycle_before_writes() -> None:
    subscription = make_subscription(
        placement=placed(),
        overrides=[
            ClusterOverrides(
                cluster_name="/", cluster_overrides=[{"path": "spec.channel.x", "value": 1}]
            )
        ],
    )
    store = _settled_store(subscription)

    with pytest.raises(PatchApplicationError):
        _reconciler(store).reconcile_key(SUB_KEY)

    assert store.mutating_calls == []


def test_missing_subscription_propagates_not_found() -> None:
    store = FakeResourceStore()

    with pytest.raises(NotFoundError):
        _reconciler(store).reconcile_key(SUB_KEY)
