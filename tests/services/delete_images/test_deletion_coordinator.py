from typing import Any

import pytest

from image_attachment.core.models.errors import FilesystemError, MetadataPersistenceError


class TestDeleteAll:
    def test_removes_every_record_and_file(self, make_attachment, seed_image, files_of) -> None:
        attachment = make_attachment()
        records = [seed_image(attachment, f"img_{i}", sort_index=i) for i in range(3)]

        deleted = attachment.deletion.delete_all("42")

        assert deleted == ["img_0", "img_1", "img_2"]
        assert attachment.repository.list_owner_records(owner_id="42") == []
        for record in records:
            assert not any(path.exists() for path in files_of(attachment, record))

    def test_missing_files_are_not_errors(self, make_attachment, seed_image, files_of) -> None:
        attachment = make_attachment()
        partial = seed_image(attachment, "img_partial")
        files_of(attachment, partial)[1].unlink()
        seed_image(attachment, "img_bare", sort_index=1, files=False)

        deleted = attachment.deletion.delete_all("42")

        assert sorted(deleted) == ["img_bare", "img_partial"]
        assert attachment.repository.list_owner_records(owner_id="42") == []

    def test_other_owners_untouched(self, make_attachment, seed_image, files_of) -> None:
        attachment = make_attachment()
        seed_image(attachment, "img_mine")
        other = seed_image(attachment, "img_theirs", owner_id="7")

        attachment.deletion.delete_all("42")

        assert attachment.repository.fetch_record(owner_id="7", image_id="img_theirs") == other
        assert all(path.exists() for path in files_of(attachment, other))

    def test_empty_owner(self, make_attachment) -> None:
        assert make_attachment().deletion.delete_all("42") == []

    def test_undeletable_file_is_skipped(
        self, make_attachment, seed_image, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        attachment = make_attachment()
        seed_image(attachment, "img_1")

        def refuse(**_: Any) -> bool:
            raise FilesystemError(message="Unable to delete image file")

        monkeypatch.setattr(attachment.storage, "remove_file", refuse)

        assert attachment.deletion.delete_all("42") == ["img_1"]
        assert attachment.repository.fetch_record(owner_id="42", image_id="img_1") is None

    def test_metadata_failures_reported_after_all_attempts(
        self, make_attachment, seed_image, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        attachment = make_attachment()
        seed_image(attachment, "img_0", sort_index=0)
        seed_image(attachment, "img_1", sort_index=1)
        remove_record = attachment.repository.remove_record

        def flaky_remove(*, owner_id: str, image_id: str) -> None:
            if image_id == "img_0":
                raise MetadataPersistenceError(message="Unable to delete image metadata")
            remove_record(owner_id=owner_id, image_id=image_id)

        monkeypatch.setattr(attachment.repository, "remove_record", flaky_remove)

        with pytest.raises(MetadataPersistenceError) as exc_info:
            attachment.deletion.delete_all("42")

        assert exc_info.value.details["failed_image_ids"] == ["img_0"]
        assert exc_info.value.details["deleted_image_ids"] == ["img_1"]
        assert attachment.repository.fetch_record(owner_id="42", image_id="img_1") is None


class TestDeleteOne:
    def test_deletes_record_and_files(self, make_attachment, seed_image, files_of) -> None:
        attachment = make_attachment()
        record = seed_image(attachment, "img_1")
        keep = seed_image(attachment, "img_2", sort_index=1)

        assert attachment.deletion.delete_one("42", "img_1") is True

        assert attachment.repository.fetch_record(owner_id="42", image_id="img_1") is None
        assert not any(path.exists() for path in files_of(attachment, record))
        assert all(path.exists() for path in files_of(attachment, keep))

    def test_unknown_id_is_noop(self, make_attachment) -> None:
        assert make_attachment().deletion.delete_one("42", "img_missing") is False

    def test_foreign_id_is_noop(self, make_attachment, seed_image, files_of) -> None:
        attachment = make_attachment()
        foreign = seed_image(attachment, "img_foreign", owner_id="7")

        assert attachment.deletion.delete_one("42", "img_foreign") is False
        assert attachment.repository.fetch_record(owner_id="7", image_id="img_foreign") is not None
        assert all(path.exists() for path in files_of(attachment, foreign))


class TestRemoveFiles:
    def test_counts_only_existing_files(self, make_attachment, seed_image, files_of) -> None:
        attachment = make_attachment()
        record = seed_image(attachment, "img_1")
        files_of(attachment, record)[0].unlink()

        removed = attachment.deletion.remove_files(
            shard=record.path, image_id=record.image_id, extension=record.extension
        )

        assert removed == len(attachment.config.sizes) - 1
