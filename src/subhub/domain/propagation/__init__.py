"""Hub-side propagation of subscriptions into Deployables."""

from __future__ import annotations

from .catalog import filter_catalog, match_catalog, refresh_deployables_annotation
from .clock import Clock, utcnow
from .drift import DriftReconciler, has_drifted
from .engine import HubReconciler
from .overrides import apply_override_op, apply_overrides, merge_overrides
from .package_filter import PackageFilterEvaluator, matches_package_filter, merged_annotations
from .results import (
    DeployableSync,
    DeployableSyncAction,
    ReconcileResult,
    SoftFailure,
    SoftFailureKind,
    StatusWrite,
    TeardownResult,
)
from .rolling_update import RollingUpdateTargetManager, rollout_target_key
from .semver_range import SemverRange, parse_version
from .status import StatusAggregator, aggregate_status
from .synthesis import DeployableSynthesizer, build_deployable, template_subscription
from .teardown import Teardown, withdrawn_status

__all__ = [
    "Clock",
    "DeployableSync",
    "DeployableSyncAction",
    "DeployableSynthesizer",
    "DriftReconciler",
    "HubReconciler",
    "PackageFilterEvaluator",
    "ReconcileResult",
    "RollingUpdateTargetManager",
    "SemverRange",
    "SoftFailure",
    "SoftFailureKind",
    "StatusAggregator",
    "StatusWrite",
    "Teardown",
    "TeardownResult",
    "aggregate_status",
    "apply_override_op",
    "apply_overrides",
    "build_deployable",
    "filter_catalog",
    "has_drifted",
    "match_catalog",
    "matches_package_filter",
    "merge_overrides",
    "merged_annotations",
    "parse_version",
    "refresh_deployables_annotation",
    "rollout_target_key",
    "template_subscription",
    "utcnow",
    "withdrawn_status",
]
