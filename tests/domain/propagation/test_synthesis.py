from __future__ import annotations

import pytest

from subhub.domain.errors import PatchApplicationError, SerializationError
from subhub.domain.model import ClusterOverrides, ObjectKey, PackageFilter
from subhub.domain.model.annotations import (
    CHANNEL_GENERATION,
    IS_GENERATED,
    IS_LOCAL_DEPLOYABLE,
    SUBSCRIPTION,
)
from subhub.domain.propagation import (
    DeployableSynthesizer,
    SoftFailure,
    SoftFailureKind,
    build_deployable,
)

from tests.helpers.resources import make_channel, make_subscription, placed
from tests.helpers.store import FakeResourceStore, transport_error


def test_template_is_a_stripped_local_clone() -> None:
    subscription = make_subscription(
        placement=placed(),
        labels={"app": "demo"},
        annotations={"app.ibm.com/deployables": "ch-ns/a"},
    )

    deployable = build_deployable(subscription, channel_generation="4")

    template = deployable.spec.template
    assert template is not None
    assert template["apiVersion"] == "app.ibm.com/v1alpha1"
    assert template["kind"] == "Subscription"
    metadata = template["metadata"]
    assert metadata["name"] == "demo"
    assert metadata["namespace"] == "default"
    assert metadata["generation"] == 1
    assert metadata["labels"] == {"app": "demo"}
    assert metadata["annotations"] == {SUBSCRIPTION: "default/demo", CHANNEL_GENERATION: "4"}
    for stripped in ("uid", "resourceVersion", "creationTimestamp", "selfLink"):
        assert stripped not in metadata
    assert template["spec"]["placement"] == {"local": True}
    assert "overrides" not in template["spec"]
    assert "status" not in template


def test_deployable_identity_and_ownership() -> None:
    subscription = make_subscription(placement=placed("clusterA", "clusterB"))

    deployable = build_deployable(subscription)

    assert deployable.key == ObjectKey(namespace="default", name="demo-deployable")
    assert deployable.metadata.annotations == {IS_GENERATED: "true", IS_LOCAL_DEPLOYABLE: "false"}
    (owner,) = deployable.metadata.owner_references
    assert owner.uid == "sub-uid"
    assert owner.kind == "Subscription"
    assert owner.controller
    assert owner.block_owner_deletion
    assert deployable.spec.placement == subscription.spec.placement
    assert deployable.spec.placement is not subscription.spec.placement


def test_global_override_lands_in_template_and_others_on_spec() -> None:
    cluster_ops = [{"path": "spec.name", "value": "redis"}]
    subscription = make_subscription(
        placement=placed(),
        overrides=[
            ClusterOverrides(
                cluster_name="/", cluster_overrides=[{"path": "spec.name", "value": "nginx"}]
            ),
            ClusterOverrides(cluster_name="clusterA", cluster_overrides=cluster_ops),
        ],
    )

    deployable = build_deployable(subscription)

    assert deployable.spec.template is not None
    assert deployable.spec.template["spec"]["name"] == "nginx"
    assert deployable.spec.overrides == [
        ClusterOverrides(cluster_name="clusterA", cluster_overrides=cluster_ops)
    ]


def test_named_cluster_override_leaves_template_untouched() -> None:
    plain = build_deployable(make_subscription(placement=placed()))
    with_override = build_deployable(
        make_subscription(
            placement=placed(),
            overrides=[
                ClusterOverrides(
                    cluster_name="clusterA",
                    cluster_overrides=[{"path": "spec.name", "value": "redis"}],
                )
            ],
        )
    )

    assert with_override.spec.template == plain.spec.template


def test_root_subscription_names_the_template() -> None:
    target = make_subscription("demo-v2", uid="target-uid", placement=placed())
    root = make_subscription("demo", placement=placed())

    deployable = build_deployable(target, root=root)

    assert deployable.spec.template is not None
    assert deployable.spec.template["metadata"]["name"] == "demo"
    assert deployable.spec.template["metadata"]["annotations"][SUBSCRIPTION] == "default/demo"
    assert deployable.metadata.owner_references[0].uid == "target-uid"


def test_unapplicable_global_override_raises() -> None:
    subscription = make_subscription(
        placement=placed(),
        overrides=[
            ClusterOverrides(
                cluster_name="/", cluster_overrides=[{"path": "spec.channel.x", "value": 1}]
            )
        ],
    )

    with pytest.raises(PatchApplicationError):
        build_deployable(subscription)


def test_unserializable_subscription_raises() -> None:
    subscription = make_subscription(
        placement=placed(), package_filter=PackageFilter(filter_ref={"bad": object()})
    )

    with pytest.raises(SerializationError):
        build_deployable(subscription)


def test_channel_generation_is_looked_up() -> None:
    store = FakeResourceStore(make_channel(generation=9))
    synthesizer = DeployableSynthesizer(store)

    deployable = synthesizer.synthesize(make_subscription(placement=placed()))

    assert deployable.spec.template is not None
    assert deployable.spec.template["metadata"]["annotations"][CHANNEL_GENERATION] == "9"


def test_channel_generation_lookup_failure_is_tolerated() -> None:
    store = FakeResourceStore()
    failures: list[SoftFailure] = []

    deployable = DeployableSynthesizer(store).synthesize(
        make_subscription(placement=placed()), soft_failures=failures
    )

    assert deployable.spec.template is not None
    assert CHANNEL_GENERATION not in deployable.spec.template["metadata"]["annotations"]
    assert [failure.kind for failure in failures] == [SoftFailureKind.CHANNEL_GENERATION]


def test_channel_generation_transport_error_is_tolerated() -> None:
    channel = make_channel()
    store = FakeResourceStore(channel)
    store.fail("get", type(channel), channel.key, transport_error())

    deployable = DeployableSynthesizer(store).synthesize(make_subscription(placement=placed()))

    assert deployable.spec.template is not None
    assert CHANNEL_GENERATION not in deployable.spec.template["metadata"]["annotations"]
