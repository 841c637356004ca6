"""Credentials for the S3-compatible object store backing channels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .env import optional_env_var, require_env_vars

DEFAULT_REGION: Final[str] = "minio"


@dataclass(frozen=True, slots=True)
class ObjectStoreConfig:
    endpoint: str
    access_key_id: str
    secret_access_key: str = field(repr=False)
    region: str = DEFAULT_REGION

    @classmethod
    def from_environment(cls) -> ObjectStoreConfig:
        values = require_env_vars(
            (
                "SUBHUB_OBJECTSTORE_ENDPOINT",
                "SUBHUB_OBJECTSTORE_ACCESS_KEY_ID",
                "SUBHUB_OBJECTSTORE_SECRET_ACCESS_KEY",
            )
        )
        return cls(
            endpoint=values["SUBHUB_OBJECTSTORE_ENDPOINT"],
            access_key_id=values["SUBHUB_OBJECTSTORE_ACCESS_KEY_ID"],
            secret_access_key=values["SUBHUB_OBJECTSTORE_SECRET_ACCESS_KEY"],
            region=optional_env_var("SUBHUB_OBJECTSTORE_REGION") or DEFAULT_REGION,
        )


def get_objectstore_config() -> ObjectStoreConfig:
    return ObjectStoreConfig.from_environment()
