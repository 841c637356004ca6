"""Public interface for the object store adapter."""

from __future__ import annotations

from .s3 import S3ObjectStore, build_s3_client

__all__ = ["S3ObjectStore", "build_s3_client"]
