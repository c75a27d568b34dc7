"""
Storage abstraction for S3-compatible buckets (R2, COS, AWS) and in-memory testing.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError


@dataclass
class StoredObject:
    body: bytes
    content_type: str
    etag: str


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def put_bytes(self, path: str, data: bytes, content_type: str) -> None:
        ...

    def get_object(self, path: str) -> StoredObject:
        ...

    def delete(self, path: str) -> None:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    stored_objects: dict[str, StoredObject] = field(default_factory=dict)

    def put_bytes(self, path: str, data: bytes, content_type: str) -> None:
        etag = '"%s"' % hashlib.md5(data).hexdigest()
        self.stored_objects[path] = StoredObject(
            body=bytes(data), content_type=content_type, etag=etag
        )

    def get_object(self, path: str) -> StoredObject:
        stored = self.stored_objects.get(path)
        if stored is None:
            raise FileNotFoundError(path)
        return stored

    def delete(self, path: str) -> None:
        self.stored_objects.pop(path, None)


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        config = Config(signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def put_bytes(self, path: str, data: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
        )

    def get_object(self, path: str) -> StoredObject:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=path)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404", "NotFound"):
                raise FileNotFoundError(path) from exc
            raise
        return StoredObject(
            body=response["Body"].read(),
            content_type=response.get("ContentType") or "application/octet-stream",
            etag=response.get("ETag", ""),
        )

    def delete(self, path: str) -> None:
        # S3 treats deleting a missing key as success.
        self._client.delete_object(Bucket=self.bucket, Key=path)
