"""Annotation keys exchanged with spoke agents and the set encoding they use."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Final

DEPLOYABLES: Final[str] = "app.ibm.com/deployables"
ROLLING_UPDATE_TARGET: Final[str] = "app.ibm.com/rollingupdate-target"
CHANNEL_GENERATION: Final[str] = "app.ibm.com/channel-generation"
SUBSCRIPTION: Final[str] = "app.ibm.com/subscription"
IS_GENERATED: Final[str] = "app.ibm.com/is-generated"
IS_LOCAL_DEPLOYABLE: Final[str] = "app.ibm.com/is-local-deployable"
DEPLOYABLE_VERSION: Final[str] = "app.ibm.com/deployable-version"

_SEPARATOR: Final[str] = ","


@dataclass(frozen=True, slots=True)
class KeySet:
    """Unordered set of ``namespace/name`` keys stored as one comma-joined string."""

    keys: frozenset[str] = frozenset()

    @classmethod
    def of(cls, keys: Iterable[str]) -> KeySet:
        return cls(frozenset(key for key in keys if key))

    @classmethod
    def parse(cls, value: str | None) -> KeySet:
        if not value:
            return cls()
        return cls.of(part.strip() for part in value.split(_SEPARATOR))

    def encode(self) -> str:
        return _SEPARATOR.join(sorted(self.keys))

    def added_since(self, previous: KeySet) -> frozenset[str]:
        return self.keys - previous.keys

    def removed_since(self, previous: KeySet) -> frozenset[str]:
        return previous.keys - self.keys

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.keys))

    def __len__(self) -> int:
        return len(self.keys)


def generated_deployable_annotations() -> dict[str, str]:
    return {IS_LOCAL_DEPLOYABLE: "false", IS_GENERATED: "true"}
