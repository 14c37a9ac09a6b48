from __future__ import annotations

import boto3
from botocore.exceptions import ClientError

from file_manager.storage.types import StorageBackend, StoredObject

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3StorageProvider:
    backend_name = StorageBackend.S3.value

    def __init__(self, *, bucket_name: str, region: str | None = None, endpoint_url: str | None = None) -> None:
        self._bucket = bucket_name
        self._client = boto3.client("s3", region_name=region, endpoint_url=endpoint_url)

    def put_object(
        self,
        *,
        key: str,
        payload: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> StoredObject:
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=payload,
            ContentType=content_type,
            Metadata=metadata or {},
        )
        return StoredObject(key=key, size=len(payload), content_type=content_type, metadata=dict(metadata or {}))

    def head_object(self, *, key: str) -> StoredObject | None:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return None
            raise
        return StoredObject(
            key=key,
            size=int(response.get("ContentLength", 0)),
            content_type=response.get("ContentType"),
            metadata=response.get("Metadata") or {},
        )

    def read_bytes(self, *, key: str) -> bytes:
        response = self._client.get_object(Bucket=self._bucket, Key=key)
        return response["Body"].read()
