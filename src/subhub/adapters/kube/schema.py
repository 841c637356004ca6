"""Pydantic models describing API server payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class KubeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMetaPayload(KubeBaseModel):
    name: str
    namespace: str = ""
    resource_version: str = Field(default="", alias="resourceVersion")


class ObjectPayload(KubeBaseModel):
    """Envelope check only; the domain codec decodes the full document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(alias="apiVersion")
    kind: str
    metadata: ObjectMetaPayload


class ListMetaPayload(KubeBaseModel):
    resource_version: str = Field(default="", alias="resourceVersion")
    continue_token: str = Field(default="", alias="continue")


class ObjectListPayload(KubeBaseModel):
    kind: str = ""
    metadata: ListMetaPayload = Field(default_factory=ListMetaPayload)
    items: list[dict[str, Any]] = Field(default_factory=list[dict[str, Any]])


class StatusPayload(KubeBaseModel):
    """``meta/v1`` Status body returned with API errors."""

    kind: str = "Status"
    status: str = ""
    message: str = ""
    reason: str = ""
    code: int | None = None
