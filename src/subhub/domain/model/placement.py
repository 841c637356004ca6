"""Placement descriptors and per-cluster override sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .meta import JsonObject

GLOBAL_CLUSTER: Final[str] = "/"


@dataclass(slots=True, kw_only=True)
class Placement:
    """Where a subscription should go; evaluation is owned by the placement layer."""

    local: bool | None = None
    clusters: list[str] = field(default_factory=list[str])
    cluster_selector: JsonObject | None = None
    placement_ref: JsonObject | None = None


@dataclass(slots=True, kw_only=True)
class ClusterOverrides:
    """Override operations for one cluster; ``"/"`` targets the template itself."""

    cluster_name: str
    cluster_overrides: list[JsonObject] = field(default_factory=list["JsonObject"])

    @property
    def is_global(self) -> bool:
        return self.cluster_name == GLOBAL_CLUSTER
