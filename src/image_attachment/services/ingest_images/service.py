"""Business logic for image ingestion.

This module coordinates sharding, derivative writes and metadata
persistence for a batch of uploaded files belonging to one owner.
"""

import threading
from collections import Counter
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger

from image_attachment.core.imaging.derivatives import DerivativeGenerator
from image_attachment.core.models.errors import ImageAttachmentError
from image_attachment.core.models.image import SizeProfile, UploadedFileDescriptor
from image_attachment.core.repositories.storage_repository import ImageFileStorage
from image_attachment.core.utils.paths import file_location
from image_attachment.core.utils.sharding import shard_path
from image_attachment.core.utils.validators import validate_model
from image_attachment.services.records.service import ImageRecordStore

from .models import IngestionOutcome, IngestionResult

logger = Logger(UTC=True)


class IngestionCoordinator:
    """Application service responsible for storing uploaded images.

    This service orchestrates, per uploaded file:
    - Content hashing into a shard directory
    - One copy per size profile, resized where the profile is constrained
    - Persisting the image record (replacing for single-image owners)

    Files are staged before the record is committed, so a record never
    references derivatives that were not written. A failure removes the
    files staged for that upload and is reported in the batch result;
    the remaining uploads are still attempted.
    """

    def __init__(
        self,
        records: ImageRecordStore,
        storage: ImageFileStorage,
        generator: DerivativeGenerator,
        *,
        upload_root: Path,
        sizes: Mapping[str, SizeProfile],
    ) -> None:
        self.records = records
        self.storage = storage
        self.generator = generator
        self._upload_root = upload_root
        self._sizes = sizes
        self._owner_locks: dict[str, threading.Lock] = {}
        self._owner_lock_holders: Counter[str] = Counter()
        self._owner_locks_guard = threading.Lock()

    def ingest(
        self,
        owner_id: str,
        files: Sequence[UploadedFileDescriptor | Mapping[str, Any] | None],
    ) -> IngestionResult:
        """Ingest a batch of uploads for one owner.

        Empty entries are skipped; each file keeps its batch position as
        its sort index.
        """
        result = IngestionResult(owner_id=owner_id)
        logger.debug(
            "Starting image ingestion",
            extra={"owner_id": owner_id, "count": len(files)},
        )

        with self._owner_lock(owner_id):
            for index, descriptor in enumerate(files):
                if not descriptor:
                    continue

                try:
                    image_id = self.ingest_one(owner_id, descriptor, index)
                except ImageAttachmentError as exc:
                    logger.warning(
                        "Image ingestion failed",
                        extra={
                            "owner_id": owner_id,
                            "index": index,
                            "error_code": exc.error_code,
                            "error": exc.message,
                        },
                    )
                    result.outcomes.append(IngestionOutcome(index=index, error=exc))
                    continue

                result.outcomes.append(IngestionOutcome(index=index, image_id=image_id))

        logger.info(
            "Image ingestion finished",
            extra={
                "owner_id": owner_id,
                "stored": len(result.image_ids),
                "failed": len(result.failures),
            },
        )
        return result

    def ingest_one(
        self,
        owner_id: str,
        descriptor: UploadedFileDescriptor | Mapping[str, Any],
        index: int,
    ) -> str:
        """Store one uploaded file and return the new image id.

        Raises:
            ValidationError: If the descriptor is invalid
            FilesystemError: If reading the upload or writing a file fails
            CodecError: If a derivative cannot be generated
            MetadataPersistenceError: If the record cannot be persisted
        """
        upload = validate_model(
            UploadedFileDescriptor, descriptor, message="Invalid uploaded file"
        )

        data = self.storage.read_bytes(path=upload.temporary_location)
        shard = shard_path(data)
        image_id = self.records.generate_image_id()

        try:
            self._write_files(upload, shard=shard, image_id=image_id)
            self.records.create(
                owner_id,
                shard,
                upload.extension,
                index,
                image_id=image_id,
            )
        except ImageAttachmentError:
            self.records.deletion.remove_files(
                shard=shard,
                image_id=image_id,
                extension=upload.extension,
            )
            raise

        logger.info(
            "Image stored",
            extra={"owner_id": owner_id, "image_id": image_id, "path": shard},
        )
        return image_id

    def _write_files(self, upload: UploadedFileDescriptor, *, shard: str, image_id: str) -> None:
        for name, profile in self._sizes.items():
            location = file_location(
                self._upload_root,
                folder=profile.folder,
                shard=shard,
                image_id=image_id,
                extension=upload.extension,
            )
            self.storage.ensure_directory(path=location.parent)
            self.storage.copy_file(source=upload.temporary_location, destination=location)

            if profile.is_constrained:
                resized = self.generator.generate(
                    location,
                    location,
                    width=profile.width,
                    height=profile.height,
                )
                logger.debug(
                    "Size profile written",
                    extra={"image_id": image_id, "profile": name, "resized": resized},
                )

    @contextmanager
    def _owner_lock(self, owner_id: str) -> Iterator[None]:
        """Serialize ingestion per owner within this process.

        A lock lives only while some caller holds or waits for it.
        """
        with self._owner_locks_guard:
            lock = self._owner_locks.setdefault(owner_id, threading.Lock())
            self._owner_lock_holders[owner_id] += 1

        try:
            with lock:
                yield
        finally:
            with self._owner_locks_guard:
                self._owner_lock_holders[owner_id] -= 1
                if not self._owner_lock_holders[owner_id]:
                    del self._owner_lock_holders[owner_id]
                    del self._owner_locks[owner_id]
