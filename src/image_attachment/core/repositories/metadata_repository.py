"""Abstract contract for image record persistence."""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from image_attachment.core.models.image import ImageRecord


class ImageRecordRepository(ABC):
    """Contract for storing and retrieving image records.

    Implementations could be DynamoDB, PostgreSQL, an ORM session, etc.
    Coordinators depend on this interface, not the implementation.
    Multiplicity policy is not enforced here; see ``ImageRecordStore``.
    Reads must observe every completed write; the replace, reorder and
    delete checks rely on it.
    """

    @abstractmethod
    def create_record(self, *, record: ImageRecord) -> None:
        """Persist a new record.

        Raises:
            MetadataPersistenceError: If the record exists or the write fails
        """

    @abstractmethod
    def fetch_record(self, *, owner_id: str, image_id: str) -> ImageRecord | None:
        """Fetch one record of an owner.

        Returns:
            The record or None if not found

        Raises:
            MetadataPersistenceError: If the fetch fails
        """

    @abstractmethod
    def remove_record(self, *, owner_id: str, image_id: str) -> None:
        """Remove a record. Removing an absent record is a no-op.

        Raises:
            MetadataPersistenceError: If deletion fails
        """

    @abstractmethod
    def list_owner_records(self, *, owner_id: str) -> list[ImageRecord]:
        """List every record of an owner.

        Returns:
            Records sorted ascending by sort_index, ties in insertion order

        Raises:
            MetadataPersistenceError: If the query fails
        """

    @abstractmethod
    def update_sort_indexes(self, *, owner_id: str, positions: Mapping[str, int]) -> None:
        """Apply new sort indexes for an owner's records as one unit.

        Either every update is applied or none is.

        Raises:
            MetadataPersistenceError: If the update fails or a record changed owner
        """
