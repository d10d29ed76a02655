"""DynamoDB implementation of ProfileRepository."""

from datetime import datetime, timezone
from typing import Any, Dict

from botocore.exceptions import ClientError
from pydantic_core import to_jsonable_python

from ..domain.entities.profile import Profile
from ..domain.interfaces.profile_repository import ProfileRepository
from .dynamodb_base import DynamoDBRepository, from_item, is_condition_failure, to_attribute, to_item


class DynamoDBProfileRepository(DynamoDBRepository, ProfileRepository):
    """DynamoDB repository for user profiles, keyed by ``id``."""

    async def get_profile(self, user_id: str) -> Profile:
        """Retrieve a profile by user ID from DynamoDB.

        Args:
            user_id: The unique identifier of the user.

        Returns:
            Profile: The profile entity.

        Raises:
            ValueError: If the profile is not found.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.get_item(Key={"id": user_id})

            if "Item" not in response:
                raise ValueError(f"Profile with id {user_id} not found")

            return self._item_to_profile(response["Item"])

    async def save_profile(self, profile: Profile) -> None:
        """Save a profile to DynamoDB.

        Args:
            profile: The profile entity to save.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.put_item(Item=to_item(profile))

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply a partial update in one UpdateItem call.

        Args:
            user_id: The unique identifier of the user.
            changes: Field names mapped to their new values.

        Returns:
            Profile: The updated profile.

        Raises:
            ValueError: If the profile is not found.
        """
        changes = {**changes, "updated_at": datetime.now(timezone.utc)}
        names, values, assignments = self._build_update(changes)

        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            try:
                response = await table.update_item(
                    Key={"id": user_id},
                    UpdateExpression="SET " + ", ".join(assignments),
                    ConditionExpression="attribute_exists(id)",
                    ExpressionAttributeNames=names,
                    ExpressionAttributeValues=values,
                    ReturnValues="ALL_NEW",
                )
            except ClientError as e:
                if is_condition_failure(e):
                    raise ValueError(f"Profile with id {user_id} not found") from e
                raise

            return self._item_to_profile(response["Attributes"])

    def _build_update(self, changes: dict[str, Any]) -> tuple[Dict[str, str], Dict[str, Any], list[str]]:
        """Build expression names, values and SET clauses for a partial update."""
        names: Dict[str, str] = {}
        values: Dict[str, Any] = {}
        assignments: list[str] = []
        for index, field in enumerate(changes):
            names[f"#f{index}"] = field
            values[f":v{index}"] = to_attribute(to_jsonable_python(changes[field]))
            assignments.append(f"#f{index} = :v{index}")
        return names, values, assignments

    def _item_to_profile(self, item: Dict[str, Any]) -> Profile:
        """Convert a DynamoDB item to a Profile entity.

        Args:
            item: The DynamoDB item.

        Returns:
            Profile: The profile entity.
        """
        return Profile.model_validate(from_item(item))
