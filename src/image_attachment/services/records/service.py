"""Image record store enforcing the owner multiplicity policy."""

import uuid

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from image_attachment.core.models.errors import ValidationError
from image_attachment.core.models.image import ImageRecord
from image_attachment.core.repositories.metadata_repository import ImageRecordRepository
from image_attachment.core.utils.constants import IMAGE_ID_PREFIX
from image_attachment.core.utils.time import utc_now_iso
from image_attachment.core.utils.validators import sanitize_validation_errors
from image_attachment.services.delete_images.service import DeletionCoordinator

logger = Logger(UTC=True)


class ImageRecordStore:
    """Creates, reads and deletes image records for owners.

    For single-image owners, ``create`` replaces: every existing image of
    the owner (files and metadata) is removed before the new record is
    inserted. Two concurrent creates for the same owner can still both
    insert; callers serialize per owner (see ``IngestionCoordinator``).
    """

    def __init__(
        self,
        repository: ImageRecordRepository,
        *,
        deletion: DeletionCoordinator,
        multiple: bool,
        record_type: type[ImageRecord] = ImageRecord,
    ) -> None:
        self.repository = repository
        self.deletion = deletion
        self.multiple = multiple
        self._record_type = record_type

    @staticmethod
    def generate_image_id() -> str:
        """Generate a unique image identifier."""
        return f"{IMAGE_ID_PREFIX}{uuid.uuid4().hex}"

    def create(
        self,
        owner_id: str,
        path: str,
        extension: str,
        sort_index: int,
        *,
        image_id: str | None = None,
    ) -> str:
        """Insert a record for an owner and return its id.

        Raises:
            ValidationError: If the record fields are invalid
            MetadataPersistenceError: If replacing or inserting fails
        """
        image_id = image_id or self.generate_image_id()

        try:
            record = self._record_type(
                image_id=image_id,
                owner_id=owner_id,
                path=path,
                extension=extension,
                sort_index=sort_index,
                created_at=utc_now_iso(),
            )
        except PydanticValidationError as exc:
            raise ValidationError(
                message="Invalid image record",
                details={"errors": sanitize_validation_errors(list(exc.errors()))},
            ) from exc

        if not self.multiple:
            for existing in self.repository.list_owner_records(owner_id=owner_id):
                logger.info(
                    "Replacing existing image of single-image owner",
                    extra={"owner_id": owner_id, "image_id": existing.image_id},
                )
                self.deletion.delete_one(owner_id, existing.image_id)

        self.repository.create_record(record=record)
        return image_id

    def delete(self, owner_id: str, image_id: str) -> None:
        """Remove one metadata row; a no-op if it does not exist."""
        self.repository.remove_record(owner_id=owner_id, image_id=image_id)

    def find_all(self, owner_id: str) -> list[ImageRecord]:
        return self.repository.list_owner_records(owner_id=owner_id)

    def find_one(self, owner_id: str) -> ImageRecord | None:
        records = self.find_all(owner_id)
        return records[0] if records else None

    def find_by_id(self, owner_id: str, image_id: str) -> ImageRecord | None:
        return self.repository.fetch_record(owner_id=owner_id, image_id=image_id)
