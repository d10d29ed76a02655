"""DynamoDB implementation of Session Repository."""

from datetime import datetime, timezone
from typing import Any, Dict

from boto3.dynamodb.conditions import Key

from ..domain.entities.reading_session import ReadingSessionRecord
from ..domain.interfaces.session_repository import SessionRepository
from .dynamodb_base import DynamoDBRepository, from_item, to_item

USER_STARTED_AT_INDEX = "user_id-started_at-index"


def _sortable_utc(value: datetime) -> str:
    """Fixed-width UTC timestamp, so string order matches time order."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class DynamoDBSessionRepository(DynamoDBRepository, SessionRepository):
    """DynamoDB repository for reading sessions.

    The table is keyed by ``id``. Per-day lookups go through a global
    secondary index on ``user_id`` and ``started_at``.
    """

    async def save_session(self, session: ReadingSessionRecord) -> None:
        """Save a session to DynamoDB.

        Args:
            session: The session record to save.

        Raises:
            Exception: If the save operation fails.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            item = self._session_to_item(session)
            await table.put_item(Item=item)

    async def get_session(self, session_id: str) -> ReadingSessionRecord:
        """Retrieve a session by ID from DynamoDB.

        Args:
            session_id: The unique identifier of the session.

        Returns:
            ReadingSessionRecord: The session record.

        Raises:
            ValueError: If the session is not found.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.get_item(Key={"id": session_id})

            if "Item" not in response:
                raise ValueError(f"Session with id {session_id} not found")

            return self._item_to_session(response["Item"])

    async def list_sessions_between(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[ReadingSessionRecord]:
        """List a user's sessions started in ``[start, end)``.

        Args:
            user_id: The unique identifier of the user.
            start: Inclusive lower bound.
            end: Exclusive upper bound.

        Returns:
            list[ReadingSessionRecord]: Matching sessions, oldest first.
        """
        lower, upper = _sortable_utc(start), _sortable_utc(end)

        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._query_all(
                table,
                IndexName=USER_STARTED_AT_INDEX,
                KeyConditionExpression=Key("user_id").eq(user_id) & Key("started_at").between(lower, upper),
            )

        # BETWEEN is inclusive on both ends
        return [self._item_to_session(item) for item in items if item["started_at"] != upper]

    def _session_to_item(self, session: ReadingSessionRecord) -> Dict[str, Any]:
        """Convert a session record to a DynamoDB item.

        Args:
            session: The session record.

        Returns:
            Dict: The DynamoDB item representation.
        """
        item = to_item(session)
        item["started_at"] = _sortable_utc(session.started_at)
        item["ended_at"] = _sortable_utc(session.ended_at)
        return item

    def _item_to_session(self, item: Dict[str, Any]) -> ReadingSessionRecord:
        """Convert a DynamoDB item to a session record.

        Args:
            item: The DynamoDB item.

        Returns:
            ReadingSessionRecord: The session record.
        """
        return ReadingSessionRecord.model_validate(from_item(item))
