"""S3-compatible object storage (AWS S3, MinIO, etc.)."""

from __future__ import annotations

import asyncio

import boto3
from botocore.exceptions import ClientError

from annoflow.infrastructure.exceptions import (
    StorageMoveError,
    StorageNotFoundError,
)
from annoflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3StorageService:
    """S3-compatible storage; storage refs are object keys inside one bucket.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3 and MinIO.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
        """
        self.bucket = bucket
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    def _exists_sync(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            raise
        return True

    async def exists(self, storage_ref: str) -> bool:
        """Return True if the object exists."""
        return await asyncio.to_thread(self._exists_sync, storage_ref)

    async def move(self, source_ref: str, target_ref: str) -> None:
        """Copy the object to target_ref, then delete the source."""
        if source_ref == target_ref:
            return

        def _move() -> None:
            if not self._exists_sync(source_ref):
                raise StorageNotFoundError(source_ref)
            self._client.copy_object(
                Bucket=self.bucket,
                Key=target_ref,
                CopySource={"Bucket": self.bucket, "Key": source_ref},
                MetadataDirective="COPY",
            )
            self._client.delete_object(Bucket=self.bucket, Key=source_ref)

        try:
            await asyncio.to_thread(_move)
        except ClientError as e:
            raise StorageMoveError(source_ref, target_ref, str(e)) from e
        logger.debug("Moved s3://%s/%s -> %s", self.bucket, source_ref, target_ref)

