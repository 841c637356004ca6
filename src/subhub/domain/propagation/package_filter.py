"""Decide whether a catalog artifact satisfies a subscription's selection constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from subhub.domain.errors import FilterEvaluationError
from subhub.domain.model.annotations import DEPLOYABLE_VERSION

from .semver_range import SemverRange

if TYPE_CHECKING:
    from subhub.domain.model import Deployable, Subscription

log = getLogger(__name__)


def merged_annotations(artifact: Deployable) -> dict[str, str]:
    """Artifact annotations, with template annotations filling only missing or blank keys."""

    merged = dict(artifact.metadata.annotations)
    for key, value in artifact.template_annotations().items():
        if not merged.get(key):
            merged[key] = value
    return merged


@dataclass(slots=True)
class PackageFilterEvaluator:
    """Compiled package filter of one subscription.

    A malformed version range is kept as ``range_error``: every artifact then
    evaluates as non-matching instead of failing the pass.
    """

    package: str = ""
    annotations: dict[str, str] = field(default_factory=dict[str, str])
    version_range: SemverRange | None = None
    range_error: FilterEvaluationError | None = None

    @classmethod
    def for_subscription(cls, subscription: Subscription) -> PackageFilterEvaluator:
        package_filter = subscription.spec.package_filter
        if package_filter is None:
            # without a filter every catalog artifact matches, whatever spec.package says
            return cls()
        evaluator = cls(package=subscription.spec.package)
        evaluator.annotations = dict(package_filter.annotations)
        if package_filter.version:
            try:
                evaluator.version_range = SemverRange.parse(package_filter.version)
            except FilterEvaluationError as exc:
                log.warning(
                    "Invalid version range %r on subscription %s: %s",
                    package_filter.version,
                    subscription.key,
                    exc,
                )
                evaluator.range_error = exc
        return evaluator

    @property
    def is_empty(self) -> bool:
        return (
            not self.package
            and not self.annotations
            and self.version_range is None
            and self.range_error is None
        )

    def matches(self, artifact: Deployable) -> bool:
        if self.package and self.package != artifact.name:
            log.debug("Name does not match, skipping %s (want %s)", artifact.key, self.package)
            return False

        if self.annotations:
            available = merged_annotations(artifact)
            if any(available.get(key) != value for key, value in self.annotations.items()):
                log.debug("Annotations do not match, skipping %s", artifact.key)
                return False

        if self.range_error is not None:
            return False
        if self.version_range is not None:
            version = artifact.metadata.annotations.get(DEPLOYABLE_VERSION)
            matched = self.version_range.contains(version)
            log.debug(
                "Version check for %s: range=%s version=%s matched=%s",
                artifact.key,
                self.version_range.expression,
                version,
                matched,
            )
            if not matched:
                return False

        return True


def matches_package_filter(subscription: Subscription, artifact: Deployable) -> bool:
    return PackageFilterEvaluator.for_subscription(subscription).matches(artifact)
