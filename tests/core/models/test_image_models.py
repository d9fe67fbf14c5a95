from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from image_attachment.core.models.image import ImageRecord, SizeProfile, UploadedFileDescriptor


class TestImageRecord:
    @pytest.mark.parametrize("path", ["ab/cd", "/abc/d", "/AB/CD", "/ab/cd/ef", ""])
    def test_invalid_shard_path_rejected(self, make_record, path: str) -> None:
        with pytest.raises(PydanticValidationError):
            make_record("img_1", path=path)

    def test_sort_index_is_strict(self, make_record) -> None:
        with pytest.raises(PydanticValidationError):
            make_record("img_1", sort_index="1")

    def test_extra_fields_ignored(self) -> None:
        record = ImageRecord.model_validate(
            {
                "image_id": "img_1",
                "owner_id": "42",
                "path": "/ab/cd",
                "extension": "png",
                "sort_index": 0,
                "created_at": "2024-01-01T10:00:00+00:00",
                "legacy": "value",
            }
        )

        assert not hasattr(record, "legacy")


class TestSizeProfile:
    def test_unconstrained(self) -> None:
        assert not SizeProfile(folder="original").is_constrained
        assert not SizeProfile(folder="original", width=0, height=0).is_constrained

    def test_constrained_by_either_axis(self) -> None:
        assert SizeProfile(folder="w", width=100).is_constrained
        assert SizeProfile(folder="h", height=100).is_constrained

    def test_folder_slashes_trimmed(self) -> None:
        assert SizeProfile(folder="/thumbs/").folder == "thumbs"

    def test_folder_may_not_traverse(self) -> None:
        with pytest.raises(PydanticValidationError):
            SizeProfile(folder="../etc")

    def test_negative_bounds_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            SizeProfile(folder="x", width=-1)


class TestUploadedFileDescriptor:
    def test_leading_dot_stripped(self) -> None:
        upload = UploadedFileDescriptor(temporary_location=Path("/tmp/php123"), extension=".png")

        assert upload.extension == "png"

    @pytest.mark.parametrize("extension", ["", ".", "a/b"])
    def test_invalid_extension(self, extension: str) -> None:
        with pytest.raises(PydanticValidationError):
            UploadedFileDescriptor(temporary_location=Path("/tmp/x"), extension=extension)
