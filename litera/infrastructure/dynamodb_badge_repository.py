"""DynamoDB implementation of BadgeRepository."""

from typing import Any, Dict, Optional

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from ..domain.entities.badge import Badge, UserBadge
from ..domain.interfaces.badge_repository import BadgeAlreadyAwardedError, BadgeRepository
from .dynamodb_base import DynamoDBRepository, from_item, is_condition_failure, to_item


class DynamoDBBadgeRepository(DynamoDBRepository, BadgeRepository):
    """Badge catalog and user badges in two DynamoDB tables.

    The catalog table is keyed by ``id``. The user badge table is keyed by
    ``user_id`` (partition) and ``badge_id`` (sort), and awards are written
    with a condition on that key, which makes the pair unique.
    """

    def __init__(self, table_name: str, user_badges_table_name: str, region_name: str = "us-east-1"):
        """Initialize the DynamoDB badge repository.

        Args:
            table_name: The name of the badge catalog table.
            user_badges_table_name: The name of the user badge table.
            region_name: AWS region name (default: us-east-1).
        """
        super().__init__(table_name, region_name)
        self.user_badges_table_name = user_badges_table_name

    async def get_badge_by_name(self, name: str) -> Optional[Badge]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._scan_all(table, FilterExpression=Attr("name").eq(name))

        item = self._first(items)
        return Badge.model_validate(from_item(item)) if item else None

    async def save_badge(self, badge: Badge) -> None:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.put_item(Item=to_item(badge))

    async def has_badge(self, user_id: str, badge_id: str) -> bool:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.user_badges_table_name)
            response = await table.get_item(Key={"user_id": user_id, "badge_id": badge_id})
            return "Item" in response

    async def award_badge(self, user_badge: UserBadge) -> None:
        """Store a user badge unless the pair already exists.

        Raises:
            BadgeAlreadyAwardedError: If the condition on the key fails.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.user_badges_table_name)
            try:
                await table.put_item(
                    Item=to_item(user_badge),
                    ConditionExpression="attribute_not_exists(user_id) AND attribute_not_exists(badge_id)",
                )
            except ClientError as e:
                if is_condition_failure(e):
                    raise BadgeAlreadyAwardedError(user_badge.user_id, user_badge.badge_id) from e
                raise

    async def list_user_badges(self, user_id: str) -> list[UserBadge]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.user_badges_table_name)
            items = await self._query_all(table, KeyConditionExpression=Key("user_id").eq(user_id))

        return [self._item_to_user_badge(item) for item in items]

    def _item_to_user_badge(self, item: Dict[str, Any]) -> UserBadge:
        return UserBadge.model_validate(from_item(item))
