"""Apply global overrides to a template and carry per-cluster ones downstream."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from subhub.domain.errors import PatchApplicationError
from subhub.domain.model import ClusterOverrides

if TYPE_CHECKING:
    from collections.abc import Iterable

    from subhub.domain.model import JsonObject

log = getLogger(__name__)


def _merge(existing: object, value: object) -> object:
    if isinstance(existing, dict) and isinstance(value, Mapping):
        merged = cast(dict[str, Any], existing)
        for key, item in cast(Mapping[str, Any], value).items():
            merged[key] = _merge(merged.get(key), item)
        return merged
    return copy.deepcopy(value)


def apply_override_op(template: JsonObject, op: object) -> None:
    """Apply one ``{"path": "a.b.c", "value": ...}`` operation to ``template`` in place."""

    if not isinstance(op, Mapping):
        raise PatchApplicationError(f"override must be an object, got {type(op).__name__}")
    op_map = cast(Mapping[str, Any], op)
    path = op_map.get("path")
    if not isinstance(path, str) or not path.strip(". "):
        raise PatchApplicationError(f"override has no usable path: {path!r}")

    fields = path.strip(".").split(".")
    if any(not segment for segment in fields):
        raise PatchApplicationError(f"override path has an empty segment: {path!r}")

    node: dict[str, Any] = template
    for depth, segment in enumerate(fields[:-1]):
        child = node.get(segment)
        if child is None:
            child = {}
            node[segment] = child
        elif not isinstance(child, dict):
            walked = ".".join(fields[: depth + 1])
            raise PatchApplicationError(f"cannot descend into non-object field {walked!r}")
        node = cast(dict[str, Any], child)

    leaf = fields[-1]
    node[leaf] = _merge(node.get(leaf), op_map.get("value"))


def apply_overrides(template: JsonObject, ops: Iterable[object]) -> JsonObject:
    for op in ops:
        apply_override_op(template, op)
    return template


def merge_overrides(
    template: JsonObject,
    overrides: Iterable[ClusterOverrides],
) -> tuple[JsonObject, list[ClusterOverrides]]:
    """Apply every ``"/"`` entry to ``template`` in order; return the rest verbatim.

    ``template`` is mutated. Per-cluster entries are copied so later edits of the
    subscription do not leak into the returned list.
    """

    remaining: list[ClusterOverrides] = []
    for entry in overrides:
        if entry.is_global:
            log.debug("Applying %d global override(s) to template", len(entry.cluster_overrides))
            apply_overrides(template, entry.cluster_overrides)
            continue
        remaining.append(
            ClusterOverrides(
                cluster_name=entry.cluster_name,
                cluster_overrides=copy.deepcopy(entry.cluster_overrides),
            )
        )
    return template, remaining
