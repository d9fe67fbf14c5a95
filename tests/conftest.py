"""
Pytest configuration and fixtures for image attachment tests.
Provides AWS mocking, a DynamoDB record table, image files and
attachment factories with proper cleanup.
"""

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import boto3
import pytest
from moto import mock_aws
from PIL import Image

from image_attachment.attachment import ImageAttachment
from image_attachment.core.infrastructure.aws.dynamodb_metadata import DynamoDBImageRecords
from image_attachment.core.models.image import ImageRecord, UploadedFileDescriptor
from image_attachment.core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_IMAGE_METADATA_TABLE_NAME,
    PARTITION_KEY,
    SORT_KEY,
)

os.environ.pop(ENV_AWS_ENDPOINT_URL, None)
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault(ENV_IMAGE_METADATA_TABLE_NAME, "image-records-test")

IMAGE_FORMATS = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG", "gif": "GIF", "webp": "WEBP"}


@pytest.fixture(scope="function")
def aws_mock() -> Iterator[None]:
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_dynamodb_table(dynamodb_resource):
    """Helper to create the image record table, partitioned by owner."""
    return dynamodb_resource.create_table(
        TableName=os.getenv(ENV_IMAGE_METADATA_TABLE_NAME),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[
            {"AttributeName": PARTITION_KEY, "KeyType": "HASH"},
            {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": PARTITION_KEY, "AttributeType": "S"},
            {"AttributeName": SORT_KEY, "AttributeType": "S"},
        ],
    )


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """
    Create the DynamoDB table for one test.

    moto discards all state when the mock context exits.
    """
    table = _create_dynamodb_table(dynamodb_resource)
    table.wait_until_exists()
    return table


@pytest.fixture
def record_repository(dynamodb_table) -> DynamoDBImageRecords:
    return DynamoDBImageRecords()


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    """
    Helper building an ImageRecord with sensible defaults.

    Usage:
        record = make_record("img_1", owner_id="42", sort_index=3)
    """

    def _make(image_id: str, **overrides: Any) -> ImageRecord:
        fields: dict[str, Any] = {
            "image_id": image_id,
            "owner_id": "42",
            "path": "/ab/cd",
            "extension": "png",
            "sort_index": 0,
            "created_at": "2024-01-01T10:00:00+00:00",
        }
        fields.update(overrides)
        return ImageRecord(**fields)

    return _make


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """
    Helper writing a solid-colour image to a temporary upload location.

    Usage:
        path = make_image("upload.jpg", size=(800, 600), color="red")
    """
    incoming = tmp_path / "incoming"
    incoming.mkdir(exist_ok=True)

    def _make(
        name: str = "upload.png",
        *,
        size: tuple[int, int] = (800, 600),
        color: str | tuple[int, int, int] = "red",
    ) -> Path:
        path = incoming / name
        extension = path.suffix.lstrip(".").lower()
        Image.new("RGB", size, color).save(path, format=IMAGE_FORMATS[extension])
        return path

    return _make


@pytest.fixture
def make_upload(make_image) -> Callable[..., UploadedFileDescriptor]:
    """Helper returning an UploadedFileDescriptor for a freshly written image."""

    def _make(
        name: str = "upload.png",
        *,
        size: tuple[int, int] = (800, 600),
        color: str | tuple[int, int, int] = "red",
    ) -> UploadedFileDescriptor:
        path = make_image(name, size=size, color=color)
        return UploadedFileDescriptor(
            temporary_location=path,
            extension=path.suffix.lstrip("."),
        )

    return _make


@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def attachment_settings(upload_root: Path) -> dict[str, Any]:
    return {
        "image_record_type": ImageRecord,
        "upload_field": "photos",
        "upload_root_path": upload_root,
        "public_root_path": "https://cdn.example.com/uploads",
        "sizes": {
            "original": {"folder": "original"},
            "medium": {"folder": "medium", "width": 400, "height": 400},
            "thumb": {"folder": "thumb", "width": 100},
        },
        "no_image_placeholder_path": "https://cdn.example.com/static/no-image.png",
        "multiple": True,
    }


@pytest.fixture
def make_attachment(
    dynamodb_table,
    attachment_settings: dict[str, Any],
) -> Callable[..., ImageAttachment]:
    """
    Helper building an ImageAttachment against the mocked table.

    Usage:
        attachment = make_attachment(multiple=False)
    """

    def _make(**overrides: Any) -> ImageAttachment:
        return ImageAttachment({**attachment_settings, **overrides})

    return _make
