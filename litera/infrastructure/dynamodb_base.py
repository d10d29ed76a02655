"""Shared plumbing for the DynamoDB repositories."""

from decimal import Decimal
from typing import Any, Dict, Optional

import aioboto3
from botocore.exceptions import ClientError
from pydantic import BaseModel


def to_item(model: BaseModel) -> Dict[str, Any]:
    """Convert an entity to a DynamoDB item.

    Dates, datetimes, UUIDs and enums become strings; floats become
    Decimal because DynamoDB rejects binary floats.
    """
    return {key: to_attribute(value) for key, value in model.model_dump(mode="json").items()}


def to_attribute(value: Any) -> Any:
    """Convert a JSON-compatible value to a DynamoDB attribute value."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, list):
        return [to_attribute(v) for v in value]
    if isinstance(value, dict):
        return {k: to_attribute(v) for k, v in value.items()}
    return value


def from_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a DynamoDB item back to plain Python numbers."""
    return {key: _from_attribute(value) for key, value in item.items()}


def _from_attribute(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, list):
        return [_from_attribute(v) for v in value]
    if isinstance(value, dict):
        return {k: _from_attribute(v) for k, v in value.items()}
    return value


def is_condition_failure(error: ClientError) -> bool:
    """True when a conditional write was rejected."""
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class DynamoDBRepository:
    """Base class holding the table name and the aioboto3 session."""

    def __init__(self, table_name: str, region_name: str = "us-east-1"):
        """Initialize the DynamoDB repository.

        Args:
            table_name: The name of the DynamoDB table.
            region_name: AWS region name (default: us-east-1).
        """
        self.table_name = table_name
        self.region_name = region_name
        self._session = aioboto3.Session()

    def _resource(self):
        return self._session.resource("dynamodb", region_name=self.region_name)

    async def _query_all(self, table, **kwargs) -> list[Dict[str, Any]]:
        """Run a query and follow pagination to the end."""
        response = await table.query(**kwargs)
        items = list(response.get("Items", []))

        while "LastEvaluatedKey" in response:
            response = await table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
            items.extend(response.get("Items", []))

        return items

    async def _scan_all(self, table, **kwargs) -> list[Dict[str, Any]]:
        """Run a scan and follow pagination to the end."""
        response = await table.scan(**kwargs)
        items = list(response.get("Items", []))

        while "LastEvaluatedKey" in response:
            response = await table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
            items.extend(response.get("Items", []))

        return items

    @staticmethod
    def _first(items: list[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        return items[0] if items else None
