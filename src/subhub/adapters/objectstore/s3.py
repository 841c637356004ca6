"""S3-compatible object store used by object-bucket channels."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from subhub.domain.ports import ObjectStoreError

if TYPE_CHECKING:
    from subhub.config import ObjectStoreConfig
    from subhub.domain.ports import ObjectStore

log = getLogger(__name__)


def build_s3_client(config: ObjectStoreConfig) -> Any:
    """Client with static credentials, a custom endpoint and path-style addressing."""

    return boto3.client(
        "s3",
        endpoint_url=config.endpoint,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        region_name=config.region,
        config=Config(s3={"addressing_style": "path"}),
    )


class S3ObjectStore:
    def __init__(self, *, config: ObjectStoreConfig | None = None, client: Any = None) -> None:
        if client is None:
            if config is None:
                raise ValueError("either config or client is required")
            client = build_s3_client(config)
        self._client = client

    def exists(self, bucket: str) -> None:
        try:
            self._client.head_bucket(Bucket=bucket)
        except (BotoCoreError, ClientError) as exc:
            log.error("Failed to access bucket %s: %s", bucket, exc)
            raise ObjectStoreError(f"bucket {bucket} is not accessible: {exc}") from exc

    def create(self, bucket: str) -> None:
        try:
            self._client.create_bucket(Bucket=bucket)
        except (BotoCoreError, ClientError) as exc:
            log.error("Failed to create bucket %s: %s", bucket, exc)
            raise ObjectStoreError(f"failed to create bucket {bucket}: {exc}") from exc

    def list(self, bucket: str) -> list[str]:
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects")
            for page in paginator.paginate(Bucket=bucket):
                keys.extend(item["Key"] for item in page.get("Contents", []))
        except (BotoCoreError, ClientError) as exc:
            log.error("Failed to list objects in %s: %s", bucket, exc)
            raise ObjectStoreError(f"failed to list bucket {bucket}: {exc}") from exc
        log.debug("Listed %d object(s) in %s", len(keys), bucket)
        return keys

    def put(self, bucket: str, name: str, content: bytes) -> None:
        try:
            self._client.put_object(Bucket=bucket, Key=name, Body=content)
        except (BotoCoreError, ClientError) as exc:
            log.error("Failed to put %s/%s: %s", bucket, name, exc)
            raise ObjectStoreError(f"failed to put {bucket}/{name}: {exc}") from exc

    def get(self, bucket: str, name: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=bucket, Key=name)
            body: bytes = response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            log.error("Failed to get %s/%s: %s", bucket, name, exc)
            raise ObjectStoreError(f"failed to get {bucket}/{name}: {exc}") from exc
        return body

    def delete(self, bucket: str, name: str) -> None:
        try:
            self._client.delete_object(Bucket=bucket, Key=name)
        except (BotoCoreError, ClientError) as exc:
            log.error("Failed to delete %s/%s: %s", bucket, name, exc)
            raise ObjectStoreError(f"failed to delete {bucket}/{name}: {exc}") from exc


if TYPE_CHECKING:

    def _as_object_store(store: S3ObjectStore) -> ObjectStore:
        return store
