from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from image_attachment.attachment import ImageAttachment
from image_attachment.core.models.image import ImageRecord
from image_attachment.core.utils.paths import file_location


@pytest.fixture
def seed_image(upload_root: Path) -> Callable[..., ImageRecord]:
    """
    Helper storing a record and, optionally, its files directly.

    Usage:
        record = seed_image(attachment, "img_1", sort_index=0, files=True)
    """

    def _seed(
        attachment: ImageAttachment,
        image_id: str,
        *,
        owner_id: str = "42",
        sort_index: int = 0,
        files: bool = True,
        **overrides: Any,
    ) -> ImageRecord:
        record = ImageRecord(
            image_id=image_id,
            owner_id=owner_id,
            path=overrides.pop("path", "/ab/cd"),
            extension=overrides.pop("extension", "png"),
            sort_index=sort_index,
            created_at=overrides.pop("created_at", f"2024-01-01T10:00:0{sort_index}+00:00"),
        )
        attachment.repository.create_record(record=record)

        if files:
            for location in record_files(attachment, record):
                location.parent.mkdir(parents=True, exist_ok=True)
                location.write_bytes(b"seeded")

        return record

    return _seed


def record_files(attachment: ImageAttachment, record: ImageRecord) -> list[Path]:
    return [
        file_location(
            attachment.config.upload_root_path,
            folder=profile.folder,
            shard=record.path,
            image_id=record.image_id,
            extension=record.extension,
        )
        for profile in attachment.config.sizes.values()
    ]


@pytest.fixture
def files_of() -> Callable[[ImageAttachment, ImageRecord], list[Path]]:
    return record_files
