"""Thin adapter over the boto3 image record table."""

import os
from typing import Any, Protocol, cast

import boto3

from image_attachment.core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_METADATA_TABLE_NAME,
)


class DynamoDBTable(Protocol):
    name: str

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def delete_item(self, *, Key: dict[str, Any]) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBClient(Protocol):
    def transact_write_items(self, *, TransactItems: list[dict[str, Any]]) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """What the record repository needs from the table."""

    @property
    def table_name(self) -> str: ...

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]: ...

    def get_item(
        self, *, key: dict[str, Any], consistent_read: bool = False
    ) -> dict[str, Any]: ...

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...

    def query(self, **kwargs: Any) -> dict[str, Any]: ...

    def transact_write_items(self, *, items: list[dict[str, Any]]) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Mechanical access to the image record table.

    boto3 and botocore exceptions propagate unchanged; translating them
    is the job of ``DynamoDBImageRecords``.
    """

    def __init__(self, table_name: str | None = None, *, resource: Any = None) -> None:
        """Bind to ``table_name`` or, if omitted, the table named in the environment."""
        name = table_name or os.getenv(ENV_IMAGE_METADATA_TABLE_NAME)
        if not name:
            raise RuntimeError(
                f"No table name given and {ENV_IMAGE_METADATA_TABLE_NAME} is not set"
            )

        resource = resource or boto3.resource(
            "dynamodb",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )
        self.table = cast(DynamoDBTable, resource.Table(name))
        # Transactions are only exposed on the low-level client.
        self._client = cast(DynamoDBClient, resource.meta.client)

    @property
    def table_name(self) -> str:
        return self.table.name

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        if condition_expression is None:
            return self.table.put_item(Item=item)
        return self.table.put_item(Item=item, ConditionExpression=condition_expression)

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]:
        return self.table.get_item(Key=key, ConsistentRead=consistent_read)

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        return self.table.delete_item(Key=key)

    def query(self, **kwargs: Any) -> dict[str, Any]:
        return self.table.query(**kwargs)

    def transact_write_items(self, *, items: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply writes atomically; items use the low-level attribute-value format."""
        return self._client.transact_write_items(TransactItems=items)
