"""Channel resource; the engine only needs its namespace, type and generation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .meta import Resource


class ChannelType(StrEnum):
    NAMESPACE = "namespace"
    HELM_REPO = "helmrepo"
    OBJECT_BUCKET = "objectbucket"
    GITHUB = "github"


@dataclass(slots=True, kw_only=True)
class ChannelSpec:
    type: str = ChannelType.NAMESPACE
    pathname: str = ""


@dataclass(slots=True, kw_only=True)
class Channel(Resource):
    KIND = "Channel"
    PLURAL = "channels"

    spec: ChannelSpec

    @property
    def generation_annotation(self) -> str:
        return str(self.metadata.generation)
