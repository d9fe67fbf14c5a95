"""Unit tests for LocalImageStorage."""

from pathlib import Path

import pytest

from image_attachment.core.infrastructure.local.filesystem_storage import LocalImageStorage
from image_attachment.core.models.errors import FilesystemError


class TestLocalImageStorage:
    def test_read_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "upload.bin"
        path.write_bytes(b"image-bytes")

        assert LocalImageStorage().read_bytes(path=path) == b"image-bytes"

    def test_read_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FilesystemError) as exc_info:
            LocalImageStorage().read_bytes(path=tmp_path / "missing")

        assert exc_info.value.error_code == "FILE_READ_FAILED"

    def test_ensure_directory_is_idempotent(self, tmp_path: Path) -> None:
        storage = LocalImageStorage()
        directory = tmp_path / "thumb" / "ab" / "cd"

        storage.ensure_directory(path=directory)
        storage.ensure_directory(path=directory)

        assert directory.is_dir()

    def test_ensure_directory_over_file_fails(self, tmp_path: Path) -> None:
        blocker = tmp_path / "thumb"
        blocker.write_text("not a directory")

        with pytest.raises(FilesystemError) as exc_info:
            LocalImageStorage().ensure_directory(path=blocker / "ab")

        assert exc_info.value.error_code == "DIRECTORY_CREATE_FAILED"

    def test_copy_file_overwrites(self, tmp_path: Path) -> None:
        source = tmp_path / "source.png"
        destination = tmp_path / "dest.png"
        source.write_bytes(b"new")
        destination.write_bytes(b"old")

        LocalImageStorage().copy_file(source=source, destination=destination)

        assert destination.read_bytes() == b"new"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["dest.png", "source.png"]

    def test_copy_missing_source_leaves_no_temporary(self, tmp_path: Path) -> None:
        with pytest.raises(FilesystemError) as exc_info:
            LocalImageStorage().copy_file(
                source=tmp_path / "missing.png",
                destination=tmp_path / "dest.png",
            )

        assert exc_info.value.error_code == "FILE_WRITE_FAILED"
        assert list(tmp_path.iterdir()) == []

    def test_remove_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "img.png"
        path.write_bytes(b"x")

        assert LocalImageStorage().remove_file(path=path) is True
        assert not path.exists()

    def test_remove_missing_file_is_not_an_error(self, tmp_path: Path) -> None:
        assert LocalImageStorage().remove_file(path=tmp_path / "gone.png") is False

    def test_remove_directory_fails(self, tmp_path: Path) -> None:
        directory = tmp_path / "img.png"
        directory.mkdir()

        with pytest.raises(FilesystemError) as exc_info:
            LocalImageStorage().remove_file(path=directory)

        assert exc_info.value.error_code == "FILE_DELETE_FAILED"
