"""Deployable resource: the distribution object consumed by spoke agents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .meta import Resource
from .placement import ClusterOverrides, Placement

if TYPE_CHECKING:
    from datetime import datetime

    from .meta import JsonObject


class DeployablePhase(StrEnum):
    UNSET = ""
    PROPAGATED = "Propagated"
    DEPLOYED = "Deployed"
    FAILED = "Failed"


@dataclass(slots=True, kw_only=True)
class ResourceUnitStatus:
    """Outcome reported for one cluster.

    ``resource_status`` is opaque here: a decoded document, or the raw JSON text
    some agents send.
    """

    phase: str = DeployablePhase.UNSET
    reason: str = ""
    message: str = ""
    last_update_time: datetime | None = None
    resource_status: JsonObject | str | bytes | None = None


@dataclass(slots=True, kw_only=True)
class DeployableStatus:
    phase: str = DeployablePhase.UNSET
    reason: str = ""
    message: str = ""
    last_update_time: datetime | None = None
    propagated_status: dict[str, ResourceUnitStatus] = field(
        default_factory=dict[str, ResourceUnitStatus]
    )


@dataclass(slots=True, kw_only=True)
class DeployableSpec:
    template: JsonObject | None = None
    overrides: list[ClusterOverrides] = field(default_factory=list[ClusterOverrides])
    placement: Placement | None = None


@dataclass(slots=True, kw_only=True)
class Deployable(Resource):
    KIND = "Deployable"
    PLURAL = "deployables"

    spec: DeployableSpec = field(default_factory=DeployableSpec)
    status: DeployableStatus = field(default_factory=DeployableStatus)

    def template_annotations(self) -> dict[str, str]:
        """Annotations embedded in the template payload, if it carries any."""

        template = self.spec.template
        if not isinstance(template, dict):
            return {}
        metadata = template.get("metadata")
        if not isinstance(metadata, dict):
            return {}
        annotations = metadata.get("annotations")
        if not isinstance(annotations, dict):
            return {}
        return {str(key): str(value) for key, value in annotations.items()}
