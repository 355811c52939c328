"""Storage: local filesystem and S3-compatible backends.

Implementations are loaded lazily inside StorageFactory.create_storage_service()
so the local backend does not import boto3.
"""

from annoflow.infrastructure.external.storage.factory import StorageFactory

__all__ = ["StorageFactory"]
