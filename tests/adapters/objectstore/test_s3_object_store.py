from __future__ import annotations

import io

import boto3
import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from subhub.adapters.objectstore import S3ObjectStore
from subhub.domain.ports import ObjectStoreError


@pytest.fixture
def s3_client():  # noqa: ANN201
    return boto3.client(
        "s3",
        endpoint_url="http://minio.local:9000",
        aws_access_key_id="key",
        aws_secret_access_key="secret",
        region_name="minio",
    )


def test_put_get_and_delete(s3_client) -> None:  # noqa: ANN001
    content = b"apiVersion: v1\nkind: ConfigMap\n"
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "put_object", {}, {"Bucket": "charts", "Key": "cm.yaml", "Body": content}
        )
        stubber.add_response(
            "get_object",
            {"Body": StreamingBody(io.BytesIO(content), len(content))},
            {"Bucket": "charts", "Key": "cm.yaml"},
        )
        stubber.add_response("delete_object", {}, {"Bucket": "charts", "Key": "cm.yaml"})
        store = S3ObjectStore(client=s3_client)

        store.put("charts", "cm.yaml", content)
        assert store.get("charts", "cm.yaml") == content
        store.delete("charts", "cm.yaml")

        stubber.assert_no_pending_responses()


def test_list_follows_pages(s3_client) -> None:  # noqa: ANN001
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "list_objects",
            {"Contents": [{"Key": "a.yaml"}], "IsTruncated": True, "NextMarker": "a.yaml"},
            {"Bucket": "charts"},
        )
        stubber.add_response(
            "list_objects",
            {"Contents": [{"Key": "b.yaml"}], "IsTruncated": False},
            {"Bucket": "charts", "Marker": "a.yaml"},
        )

        assert S3ObjectStore(client=s3_client).list("charts") == ["a.yaml", "b.yaml"]


def test_exists_and_create(s3_client) -> None:  # noqa: ANN001
    with Stubber(s3_client) as stubber:
        stubber.add_response("head_bucket", {}, {"Bucket": "charts"})
        stubber.add_response("create_bucket", {}, {"Bucket": "new"})
        store = S3ObjectStore(client=s3_client)

        store.exists("charts")
        store.create("new")


def test_client_errors_are_wrapped(s3_client) -> None:  # noqa: ANN001
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        stubber.add_client_error("get_object", service_error_code="NoSuchKey")

        store = S3ObjectStore(client=s3_client)
        with pytest.raises(ObjectStoreError):
            store.exists("missing")
        with pytest.raises(ObjectStoreError):
            store.get("charts", "missing.yaml")


def test_requires_config_or_client() -> None:
    with pytest.raises(ValueError, match="config or client"):
        S3ObjectStore()
