"""DynamoDB-backed implementation of ImageRecordRepository."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from image_attachment.core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from image_attachment.core.models.errors import MetadataPersistenceError
from image_attachment.core.models.image import ImageRecord
from image_attachment.core.repositories.metadata_repository import ImageRecordRepository
from image_attachment.core.utils.constants import (
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_METADATA_LIST_FAILED,
    ERROR_CODE_METADATA_SORT_FAILED,
    MAX_TRANSACTION_ITEMS,
    PARTITION_KEY,
    SORT_KEY,
)

Item = dict[str, Any]

logger = Logger(UTC=True)

_serializer = TypeSerializer()


def _to_item(record: ImageRecord) -> Item:
    """Dump a record into DynamoDB-compatible attribute values."""
    item: Item = {}
    for name, value in record.model_dump(mode="json").items():
        if value is None:
            continue
        item[name] = Decimal(str(value)) if isinstance(value, float) else value
    return item


def _key(owner_id: str, image_id: str) -> Item:
    return {PARTITION_KEY: owner_id, SORT_KEY: image_id}


def _from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


class DynamoDBImageRecords(ImageRecordRepository):
    """DynamoDB-backed image record storage with error handling.

    Table layout:
    - partition key ``owner_id`` (S)
    - sort key ``image_id`` (S)

    Every read uses strongly consistent reads on the base table, so a
    write is visible to the next replace, reorder or delete check.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(
        self,
        adapter: DynamoDBAdapterProtocol | None = None,
        *,
        record_type: type[ImageRecord] = ImageRecord,
    ) -> None:
        """Initialize with DynamoDB adapter and the record factory."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()
        self._record_type = record_type

    def create_record(self, *, record: ImageRecord) -> None:
        """Create a record.

        Raises:
            MetadataPersistenceError: If the id is taken or the write fails
        """
        logger.debug(
            "Creating image record",
            extra={"image_id": record.image_id, "owner_id": record.owner_id},
        )

        try:
            self._db.put_item(
                item=_to_item(record),
                condition_expression=f"attribute_not_exists({SORT_KEY})",
            )
            logger.info(
                "Image record created",
                extra={"image_id": record.image_id, "owner_id": record.owner_id},
            )

        except ClientError as exc:
            logger.error(
                "DynamoDB put_item failed",
                extra={"image_id": record.image_id, "owner_id": record.owner_id},
            )

            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise MetadataPersistenceError(
                    message="An image record with this id already exists",
                    error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                    details={"image_id": record.image_id},
                ) from exc

            raise MetadataPersistenceError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": record.image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating image record")
            raise MetadataPersistenceError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": record.image_id},
            ) from exc

    def fetch_record(self, *, owner_id: str, image_id: str) -> ImageRecord | None:
        """Fetch a single record.

        Raises:
            MetadataPersistenceError: If the fetch fails
        """
        logger.debug("Fetching image record", extra={"image_id": image_id})

        try:
            response = self._db.get_item(
                key=_key(owner_id, image_id), consistent_read=True
            )
        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"image_id": image_id})
            raise MetadataPersistenceError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching image record")
            raise MetadataPersistenceError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return self._to_record(item)

    def remove_record(self, *, owner_id: str, image_id: str) -> None:
        """Remove a record.

        Raises:
            MetadataPersistenceError: If deletion fails
        """
        logger.debug("Removing image record", extra={"image_id": image_id})

        try:
            self._db.delete_item(key=_key(owner_id, image_id))
            logger.info("Image record removed", extra={"image_id": image_id})

        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"image_id": image_id})
            raise MetadataPersistenceError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing image record")
            raise MetadataPersistenceError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

    def list_owner_records(self, *, owner_id: str) -> list[ImageRecord]:
        """List an owner's records in sort order.

        NOTE:
        - The partition is ordered by image_id, so records are sorted by
          (sort_index, created_at) here; ties keep insertion order.
        - Results are paginated internally until exhausted.
        """
        logger.debug("Listing owner images", extra={"owner_id": owner_id})

        query_kwargs: dict[str, Any] = {
            "KeyConditionExpression": Key(PARTITION_KEY).eq(owner_id),
            "ConsistentRead": True,
        }

        items: list[Item] = []
        last_evaluated_key: dict[str, Any] | None = None

        try:
            while True:
                if last_evaluated_key:
                    query_kwargs["ExclusiveStartKey"] = last_evaluated_key

                response = self._db.query(**query_kwargs)
                page_items = response.get("Items", [])

                if not isinstance(page_items, list):
                    raise MetadataPersistenceError(
                        message="Invalid query response from DynamoDB",
                        error_code=ERROR_CODE_METADATA_LIST_FAILED,
                        details={"owner_id": owner_id},
                    )

                items.extend(page_items)

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break

        except MetadataPersistenceError:
            raise

        except ClientError as exc:
            logger.error("DynamoDB query failed", extra={"owner_id": owner_id})
            raise MetadataPersistenceError(
                message="Unable to list images for this owner",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"owner_id": owner_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing images")
            raise MetadataPersistenceError(
                message="Unable to list images for this owner",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"owner_id": owner_id},
            ) from exc

        records = sorted(
            (self._to_record(item) for item in items),
            key=lambda record: (record.sort_index, record.created_at),
        )

        logger.debug(
            "Owner images listed",
            extra={"owner_id": owner_id, "count": len(records)},
        )
        return records

    def update_sort_indexes(self, *, owner_id: str, positions: Mapping[str, int]) -> None:
        """Rewrite sort indexes in a single DynamoDB transaction.

        Each update is conditioned on the record existing under the owner,
        so an unknown or foreign id cancels the whole transaction instead of
        creating a stray item.

        Raises:
            ValueError: If more positions are given than one transaction allows
            MetadataPersistenceError: If the transaction fails
        """
        if not positions:
            return

        if len(positions) > MAX_TRANSACTION_ITEMS:
            raise ValueError(
                f"Cannot reorder more than {MAX_TRANSACTION_ITEMS} images in one call"
            )

        transact_items = [
            {
                "Update": {
                    "TableName": self._db.table_name,
                    "Key": {
                        name: _serializer.serialize(value)
                        for name, value in _key(owner_id, image_id).items()
                    },
                    "UpdateExpression": "SET sort_index = :sort_index",
                    "ConditionExpression": f"attribute_exists({SORT_KEY})",
                    "ExpressionAttributeValues": {
                        ":sort_index": _serializer.serialize(sort_index),
                    },
                }
            }
            for image_id, sort_index in positions.items()
        ]

        logger.debug(
            "Updating sort indexes",
            extra={"owner_id": owner_id, "count": len(transact_items)},
        )

        try:
            self._db.transact_write_items(items=transact_items)
            logger.info(
                "Sort indexes updated",
                extra={"owner_id": owner_id, "count": len(transact_items)},
            )

        except ClientError as exc:
            logger.error(
                "DynamoDB transact_write_items failed",
                extra={
                    "owner_id": owner_id,
                    "code": exc.response.get("Error", {}).get("Code"),
                },
            )
            raise MetadataPersistenceError(
                message="Unable to reorder images",
                error_code=ERROR_CODE_METADATA_SORT_FAILED,
                details={"owner_id": owner_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error reordering images")
            raise MetadataPersistenceError(
                message="Unable to reorder images",
                error_code=ERROR_CODE_METADATA_SORT_FAILED,
                details={"owner_id": owner_id},
            ) from exc

    def _to_record(self, item: Item) -> ImageRecord:
        """Materialize a stored item through the configured record type."""
        if not isinstance(item, dict):
            raise MetadataPersistenceError(
                message="Invalid image metadata format",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
            )

        data = {name: _from_dynamo(value) for name, value in item.items()}
        try:
            return self._record_type.model_validate(data)
        except PydanticValidationError as exc:
            logger.error(
                "Stored image record failed validation",
                extra={"image_id": data.get("image_id")},
            )
            raise MetadataPersistenceError(
                message="Invalid image metadata format",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
                details={"image_id": data.get("image_id")},
            ) from exc
