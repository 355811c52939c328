"""Tests for S3StorageService with a stubbed boto3 client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from annoflow.core.config import Settings
from annoflow.infrastructure.exceptions import StorageMoveError, StorageNotFoundError
from annoflow.infrastructure.external.storage import StorageFactory
from annoflow.infrastructure.external.storage.s3_storage import S3StorageService


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3():
    service = S3StorageService(
        bucket="assets", access_key="test", secret_key="test", endpoint_url="http://minio:9000"
    )
    service._client = MagicMock()
    return service


async def test_move_copies_then_deletes_source(s3) -> None:
    await s3.move("projects/p1/annotation/a.png", "projects/p1/review/a.png")

    s3._client.copy_object.assert_called_once_with(
        Bucket="assets",
        Key="projects/p1/review/a.png",
        CopySource={"Bucket": "assets", "Key": "projects/p1/annotation/a.png"},
        MetadataDirective="COPY",
    )
    s3._client.delete_object.assert_called_once_with(
        Bucket="assets", Key="projects/p1/annotation/a.png"
    )


async def test_move_missing_source_raises_not_found(s3) -> None:
    s3._client.head_object.side_effect = _client_error("404", "HeadObject")

    with pytest.raises(StorageNotFoundError):
        await s3.move("projects/p1/annotation/a.png", "projects/p1/review/a.png")
    s3._client.copy_object.assert_not_called()


async def test_copy_failure_becomes_move_error(s3) -> None:
    s3._client.copy_object.side_effect = _client_error("AccessDenied", "CopyObject")

    with pytest.raises(StorageMoveError):
        await s3.move("projects/p1/annotation/a.png", "projects/p1/review/a.png")
    s3._client.delete_object.assert_not_called()


async def test_exists_maps_missing_key_to_false(s3) -> None:
    assert await s3.exists("projects/p1/annotation/a.png")

    s3._client.head_object.side_effect = _client_error("NoSuchKey", "HeadObject")
    assert not await s3.exists("projects/p1/annotation/a.png")


def test_factory_builds_s3_backend() -> None:
    settings = Settings(
        _env_file=None,
        storage_backend="s3",
        s3_bucket="assets",
        s3_access_key="test",
        s3_secret_key="test",
    )

    service = StorageFactory.create_storage_service(settings)

    assert isinstance(service, S3StorageService)
    assert service.bucket == "assets"
