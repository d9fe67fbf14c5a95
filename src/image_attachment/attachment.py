"""Image attachment facade wired into an owner entity's lifecycle.

The owning framework calls the hooks of ``OwnerImages``:

- ``before_validate`` before the owner is validated or saved
- ``after_save`` after the owner was created or updated
- ``before_delete`` before the owner is deleted

and reads images back through ``get_image`` / ``get_all_images``.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from aws_lambda_powertools import Logger

from image_attachment.core.imaging.derivatives import DerivativeGenerator
from image_attachment.core.infrastructure.aws.dynamodb_metadata import DynamoDBImageRecords
from image_attachment.core.infrastructure.local.filesystem_storage import LocalImageStorage
from image_attachment.core.models.config import AttachmentConfig, load_config
from image_attachment.core.models.errors import ValidationError
from image_attachment.core.models.image import ImageRecord, SizeProfile, UploadedFileDescriptor
from image_attachment.core.repositories.metadata_repository import ImageRecordRepository
from image_attachment.core.repositories.storage_repository import ImageFileStorage
from image_attachment.core.utils.constants import (
    DEFAULT_SIZE_PROFILE,
    ERROR_CODE_FILES_ALREADY_CAPTURED,
    ERROR_CODE_OWNER_NOT_BOUND,
    ERROR_CODE_UNKNOWN_SIZE_PROFILE,
)
from image_attachment.core.utils.decorators import lifecycle_hook
from image_attachment.core.utils.paths import public_url
from image_attachment.services.delete_images.service import DeletionCoordinator
from image_attachment.services.ingest_images.models import IngestionResult
from image_attachment.services.ingest_images.service import IngestionCoordinator
from image_attachment.services.records.service import ImageRecordStore
from image_attachment.services.sort_images.service import SortCoordinator

logger = Logger(UTC=True)

PendingFile = UploadedFileDescriptor | Mapping[str, Any] | None


class ImageAttachment:
    """Wires the image services for one attachment configuration.

    Configuration is validated before any infrastructure is touched, so a
    missing setting fails with ``ConfigurationError`` and no I/O.
    """

    def __init__(
        self,
        config: AttachmentConfig | Mapping[str, Any],
        *,
        repository: ImageRecordRepository | None = None,
        storage: ImageFileStorage | None = None,
        generator: DerivativeGenerator | None = None,
    ) -> None:
        self.config = load_config(config)

        self.repository = repository or DynamoDBImageRecords(
            record_type=self.config.image_record_type
        )
        self.storage = storage or LocalImageStorage()
        self.generator = generator or DerivativeGenerator()

        self.deletion = DeletionCoordinator(
            self.repository,
            self.storage,
            upload_root=self.config.upload_root_path,
            sizes=self.config.sizes,
        )
        self.records = ImageRecordStore(
            self.repository,
            deletion=self.deletion,
            multiple=self.config.multiple,
            record_type=self.config.image_record_type,
        )
        self.sorting = SortCoordinator(self.repository)
        self.ingestion = IngestionCoordinator(
            self.records,
            self.storage,
            self.generator,
            upload_root=self.config.upload_root_path,
            sizes=self.config.sizes,
        )

    def for_owner(self, owner_id: Any = None) -> "OwnerImages":
        """Return the image view for one owner entity instance.

        ``owner_id`` may be omitted for entities that are not saved yet and
        supplied later to ``after_save``.
        """
        return OwnerImages(self, owner_id)

    def profile(self, name: str) -> SizeProfile:
        """Look up a configured size profile.

        Raises:
            ValidationError: If no profile has this name
        """
        try:
            return self.config.sizes[name]
        except KeyError as exc:
            raise ValidationError(
                message=f"Unknown size profile '{name}'",
                error_code=ERROR_CODE_UNKNOWN_SIZE_PROFILE,
                details={"profile": name, "available": list(self.config.sizes)},
            ) from exc

    @property
    def placeholder_url(self) -> str:
        return self.config.no_image_placeholder_path

    def image_url(self, record: ImageRecord, profile_name: str = DEFAULT_SIZE_PROFILE) -> str:
        profile = self.profile(profile_name)
        return public_url(
            self.config.public_root_path,
            folder=profile.folder,
            shard=record.path,
            image_id=record.image_id,
            extension=record.extension,
        )


class OwnerImages:
    """Images of one owner entity, plus its pending uploads."""

    def __init__(self, attachment: ImageAttachment, owner_id: Any = None) -> None:
        self.attachment = attachment
        self.owner_id: str | None = None if owner_id is None else str(owner_id)
        self._files: list[PendingFile] | None = None
        self._discovered = False

    @property
    def pending_files(self) -> list[PendingFile]:
        return list(self._files or [])

    def set_files(self, files: Sequence[PendingFile] | PendingFile) -> None:
        """Supply uploads directly instead of through standard discovery.

        Raises:
            ValidationError: If uploads were already captured by discovery
        """
        if self._discovered:
            raise ValidationError(
                message="Uploaded files were already captured from the request",
                error_code=ERROR_CODE_FILES_ALREADY_CAPTURED,
                details={"upload_field": self.attachment.config.upload_field},
            )

        self._files = _as_list(files)

    @lifecycle_hook
    def before_validate(self, uploads: Mapping[str, Any]) -> None:
        """Capture pending uploads found under the configured field.

        Files supplied through ``set_files`` take precedence.
        """
        if self._files:
            return

        found = uploads.get(self.attachment.config.upload_field)
        if not found:
            return

        self._files = _as_list(found)
        self._discovered = True
        logger.debug(
            "Captured uploaded files",
            extra={"owner_id": self.owner_id, "count": len(self._files)},
        )

    @lifecycle_hook
    def after_save(self, owner_id: Any = None) -> IngestionResult:
        """Store pending uploads for the (now persisted) owner."""
        if owner_id is not None:
            self.owner_id = str(owner_id)
        owner = self._require_owner()

        files = self.pending_files
        self._files = None
        self._discovered = False

        if not files:
            return IngestionResult(owner_id=owner)

        return self.attachment.ingestion.ingest(owner, files)

    @lifecycle_hook
    def before_delete(self) -> list[str]:
        return self.attachment.deletion.delete_all(self._require_owner())

    def get_image(self, profile: str = DEFAULT_SIZE_PROFILE) -> str:
        """URL of the first image under ``profile``, or the placeholder URL."""
        self.attachment.profile(profile)
        record = self.attachment.records.find_one(self._require_owner())

        if record is None:
            return self.attachment.placeholder_url

        return self.attachment.image_url(record, profile)

    def get_all_images(self, profile: str = DEFAULT_SIZE_PROFILE) -> dict[str, str] | list[str]:
        """Mapping of image id to URL under ``profile``.

        An owner without images gets a one-element list holding the
        placeholder URL, unlike ``get_image`` which returns it bare.
        """
        self.attachment.profile(profile)
        records = self.attachment.records.find_all(self._require_owner())

        if not records:
            return [self.attachment.placeholder_url]

        return {
            record.image_id: self.attachment.image_url(record, profile)
            for record in records
        }

    @lifecycle_hook
    def sort_images(self, image_ids: Sequence[str]) -> list[str]:
        return self.attachment.sorting.sort(self._require_owner(), image_ids)

    @lifecycle_hook
    def delete_image(self, image_id: str) -> bool:
        return self.attachment.deletion.delete_one(self._require_owner(), image_id)

    @lifecycle_hook
    def delete_images(self) -> list[str]:
        return self.attachment.deletion.delete_all(self._require_owner())

    def _require_owner(self) -> str:
        if self.owner_id is None:
            raise ValidationError(
                message="Owner entity has no primary key yet",
                error_code=ERROR_CODE_OWNER_NOT_BOUND,
            )
        return self.owner_id


def _as_list(files: Sequence[PendingFile] | PendingFile) -> list[PendingFile]:
    if files is None:
        return []
    if isinstance(files, (UploadedFileDescriptor, Mapping)):
        return [files]
    return list(files)
