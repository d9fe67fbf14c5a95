"""Business logic for explicit image reordering."""

from collections.abc import Sequence

from aws_lambda_powertools import Logger

from image_attachment.core.models.errors import ValidationError
from image_attachment.core.repositories.metadata_repository import ImageRecordRepository
from image_attachment.core.utils.constants import (
    ERROR_CODE_SORT_ORDER_MISMATCH,
    MAX_TRANSACTION_ITEMS,
)
from image_attachment.core.utils.validators import validate_model

from .models import SortImagesRequest

logger = Logger(UTC=True)


class SortCoordinator:
    """Rewrites an owner's image order from an explicit id permutation."""

    def __init__(self, repository: ImageRecordRepository) -> None:
        self.repository = repository

    def sort(self, owner_id: str, image_ids: Sequence[str]) -> list[str]:
        """Give each of the owner's images the sort index of its position.

        Returns:
            The applied order

        Raises:
            ValidationError: If ``image_ids`` is not exactly a permutation
                of the owner's current image ids
            MetadataPersistenceError: If the update fails; nothing is applied
        """
        request = validate_model(
            SortImagesRequest,
            {"owner_id": owner_id, "image_ids": list(image_ids)},
            message="Invalid image order",
        )

        records = self.repository.list_owner_records(owner_id=request.owner_id)
        current = {record.image_id for record in records}
        requested = set(request.image_ids)

        missing = sorted(current - requested)
        unexpected = sorted(requested - current)
        if missing or unexpected:
            logger.warning(
                "Image order does not match owner images",
                extra={"owner_id": owner_id, "missing": missing, "unexpected": unexpected},
            )
            raise ValidationError(
                message="Image order must list every image of the owner exactly once",
                error_code=ERROR_CODE_SORT_ORDER_MISMATCH,
                details={"owner_id": owner_id, "missing": missing, "unexpected": unexpected},
            )

        if len(request.image_ids) > MAX_TRANSACTION_ITEMS:
            raise ValidationError(
                message=f"Cannot reorder more than {MAX_TRANSACTION_ITEMS} images at once",
                details={"owner_id": owner_id, "count": len(request.image_ids)},
            )

        positions = {image_id: index for index, image_id in enumerate(request.image_ids)}
        self.repository.update_sort_indexes(owner_id=request.owner_id, positions=positions)

        logger.info(
            "Images reordered",
            extra={"owner_id": owner_id, "count": len(positions)},
        )
        return list(request.image_ids)
