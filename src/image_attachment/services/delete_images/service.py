"""Business logic for image deletion.

Files are removed best-effort: a missing derivative is expected after an
earlier partial failure and is not an error. Metadata removal is
authoritative: it is always attempted and its failures are reported.
"""

from collections.abc import Mapping
from pathlib import Path

from aws_lambda_powertools import Logger

from image_attachment.core.models.errors import FilesystemError, MetadataPersistenceError
from image_attachment.core.models.image import ImageRecord, SizeProfile
from image_attachment.core.repositories.metadata_repository import ImageRecordRepository
from image_attachment.core.repositories.storage_repository import ImageFileStorage
from image_attachment.core.utils.constants import ERROR_CODE_METADATA_DELETE_FAILED
from image_attachment.core.utils.paths import file_location

logger = Logger(UTC=True)


class DeletionCoordinator:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Removal of every size-profile file of a record from the upload tree
    - Removal of the record from the metadata store
    """

    def __init__(
        self,
        repository: ImageRecordRepository,
        storage: ImageFileStorage,
        *,
        upload_root: Path,
        sizes: Mapping[str, SizeProfile],
    ) -> None:
        self.repository = repository
        self.storage = storage
        self._upload_root = upload_root
        self._sizes = sizes

    def delete_all(self, owner_id: str) -> list[str]:
        """Delete every image of an owner.

        Every record is attempted even if an earlier one fails.

        Returns:
            Ids of the records that were removed

        Raises:
            MetadataPersistenceError: If listing fails, or if one or more
                records could not be removed (ids in ``details``)
        """
        logger.debug("Deleting all images", extra={"owner_id": owner_id})

        records = self.repository.list_owner_records(owner_id=owner_id)
        deleted: list[str] = []
        failed: list[str] = []
        last_error: MetadataPersistenceError | None = None

        for record in records:
            try:
                self._delete_record(record)
            except MetadataPersistenceError as exc:
                failed.append(record.image_id)
                last_error = exc
                continue
            deleted.append(record.image_id)

        if failed:
            logger.error(
                "Some image records could not be deleted",
                extra={"owner_id": owner_id, "failed_image_ids": failed},
            )
            raise MetadataPersistenceError(
                message="Unable to delete all image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={
                    "owner_id": owner_id,
                    "deleted_image_ids": deleted,
                    "failed_image_ids": failed,
                },
            ) from last_error

        logger.info(
            "All images deleted",
            extra={"owner_id": owner_id, "count": len(deleted)},
        )
        return deleted

    def delete_one(self, owner_id: str, image_id: str) -> bool:
        """Delete one image of an owner.

        Returns:
            True if the image was deleted, False if it does not exist or
            belongs to another owner

        Raises:
            MetadataPersistenceError: If the lookup or removal fails
        """
        record = self.repository.fetch_record(owner_id=owner_id, image_id=image_id)

        if record is None:
            logger.debug(
                "Image not found for owner, nothing to delete",
                extra={"owner_id": owner_id, "image_id": image_id},
            )
            return False

        self._delete_record(record)
        logger.info(
            "Image deleted",
            extra={"owner_id": owner_id, "image_id": image_id},
        )
        return True

    def remove_files(self, *, shard: str, image_id: str, extension: str) -> int:
        """Remove every size-profile file of one image, best-effort.

        Returns:
            Number of files actually removed
        """
        removed = 0

        for name, profile in self._sizes.items():
            location = file_location(
                self._upload_root,
                folder=profile.folder,
                shard=shard,
                image_id=image_id,
                extension=extension,
            )
            try:
                if self.storage.remove_file(path=location):
                    removed += 1
            except FilesystemError as exc:
                logger.warning(
                    "Skipping image file that could not be removed",
                    extra={
                        "image_id": image_id,
                        "profile": name,
                        "path": str(location),
                        "error": exc.message,
                    },
                )

        return removed

    def _delete_record(self, record: ImageRecord) -> None:
        removed = self.remove_files(
            shard=record.path,
            image_id=record.image_id,
            extension=record.extension,
        )
        logger.debug(
            "Image files removed",
            extra={"image_id": record.image_id, "removed": removed},
        )
        self.repository.remove_record(owner_id=record.owner_id, image_id=record.image_id)
