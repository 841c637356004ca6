"""Object identity and ownership shared by every hub resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Final

API_GROUP: Final[str] = "app.ibm.com"
API_VERSION: Final[str] = f"{API_GROUP}/v1alpha1"

type JsonObject = dict[str, Any]


@dataclass(frozen=True, slots=True)
class ObjectKey:
    """Namespaced name of a resource."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def parse(cls, value: str, *, default_namespace: str) -> ObjectKey:
        """Parse ``namespace/name``; a bare name falls back to ``default_namespace``."""

        namespace, sep, name = value.partition("/")
        if not sep:
            return cls(namespace=default_namespace, name=value)
        return cls(namespace=namespace, name=name)


@dataclass(slots=True, kw_only=True)
class OwnerReference:
    """Typed owner relation; garbage collection and teardown key off ``uid``."""

    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = False
    block_owner_deletion: bool = False


@dataclass(slots=True, kw_only=True)
class ObjectMeta:
    name: str
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: str | None = None
    self_link: str = ""
    labels: dict[str, str] = field(default_factory=dict[str, str])
    annotations: dict[str, str] = field(default_factory=dict[str, str])
    owner_references: list[OwnerReference] = field(default_factory=list[OwnerReference])

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(namespace=self.namespace, name=self.name)

    def is_owned_by(self, uid: str) -> bool:
        return bool(uid) and any(ref.uid == uid for ref in self.owner_references)

    def controller_reference(self) -> OwnerReference | None:
        return next((ref for ref in self.owner_references if ref.controller), None)


@dataclass(slots=True, kw_only=True)
class Resource:
    """Base for the custom resources handled by the engine."""

    KIND: ClassVar[str]
    PLURAL: ClassVar[str]
    API_VERSION: ClassVar[str] = API_VERSION

    metadata: ObjectMeta

    @property
    def key(self) -> ObjectKey:
        return self.metadata.key

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def owner_reference(self) -> OwnerReference:
        """Controller reference pointing at this object."""

        return OwnerReference(
            api_version=self.API_VERSION,
            kind=self.KIND,
            name=self.metadata.name,
            uid=self.metadata.uid,
            controller=True,
            block_owner_deletion=True,
        )
