"""Kubernetes-style label selectors used by package filters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from subhub.domain.errors import FilterEvaluationError


class SelectorOperator(StrEnum):
    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass(slots=True, kw_only=True)
class LabelSelectorRequirement:
    key: str
    operator: str
    values: list[str] = field(default_factory=list[str])

    def _operator(self) -> SelectorOperator:
        try:
            operator = SelectorOperator(self.operator)
        except ValueError as exc:
            raise FilterEvaluationError(
                f"invalid selector operator {self.operator!r} for key {self.key!r}"
            ) from exc
        if not self.key:
            raise FilterEvaluationError("selector requirement without key")
        if operator in (SelectorOperator.IN, SelectorOperator.NOT_IN) and not self.values:
            raise FilterEvaluationError(f"operator {operator} on {self.key!r} requires values")
        if operator in (SelectorOperator.EXISTS, SelectorOperator.DOES_NOT_EXIST) and self.values:
            raise FilterEvaluationError(f"operator {operator} on {self.key!r} takes no values")
        return operator

    def matches(self, labels: Mapping[str, str]) -> bool:
        operator = self._operator()
        if operator is SelectorOperator.IN:
            return labels.get(self.key) in self.values
        if operator is SelectorOperator.NOT_IN:
            return labels.get(self.key) not in self.values
        if operator is SelectorOperator.EXISTS:
            return self.key in labels
        return self.key not in labels

    def to_query(self) -> str:
        operator = self._operator()
        if operator is SelectorOperator.EXISTS:
            return self.key
        if operator is SelectorOperator.DOES_NOT_EXIST:
            return f"!{self.key}"
        keyword = "in" if operator is SelectorOperator.IN else "notin"
        return f"{self.key} {keyword} ({','.join(sorted(self.values))})"


@dataclass(slots=True, kw_only=True)
class LabelSelector:
    match_labels: dict[str, str] = field(default_factory=dict[str, str])
    match_expressions: list[LabelSelectorRequirement] = field(
        default_factory=list[LabelSelectorRequirement]
    )

    @property
    def is_empty(self) -> bool:
        return not self.match_labels and not self.match_expressions

    def validate(self) -> None:
        """Raise ``FilterEvaluationError`` if any requirement is malformed."""

        for requirement in self.match_expressions:
            requirement.to_query()

    def matches(self, labels: Mapping[str, str]) -> bool:
        self.validate()
        if any(labels.get(key) != value for key, value in self.match_labels.items()):
            return False
        return all(requirement.matches(labels) for requirement in self.match_expressions)

    def to_query(self) -> str:
        """Render the selector in the ``labelSelector`` query syntax."""

        parts = [f"{key}={value}" for key, value in sorted(self.match_labels.items())]
        parts.extend(requirement.to_query() for requirement in self.match_expressions)
        return ",".join(parts)
