"""Reading session repository interface."""

from datetime import datetime
from typing import Protocol, runtime_checkable

from ..entities.reading_session import ReadingSessionRecord


@runtime_checkable
class SessionRepository(Protocol):
    """Protocol defining the interface for reading session repositories.

    This interface can be implemented by different storage backends
    (in-memory, DynamoDB, etc.) to provide session persistence.
    """

    async def save_session(self, session: ReadingSessionRecord) -> None:
        """Save a finished session.

        Saving a record whose id is already stored replaces it, so a
        retried save does not create a duplicate.

        Args:
            session: The session record to save.
        """
        ...

    async def get_session(self, session_id: str) -> ReadingSessionRecord:
        """Retrieve a session by ID.

        Args:
            session_id: The unique identifier of the session.

        Returns:
            ReadingSessionRecord: The session record.

        Raises:
            ValueError: If the session is not found.
        """
        ...

    async def list_sessions_between(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[ReadingSessionRecord]:
        """List a user's sessions with ``start <= started_at < end``.

        Args:
            user_id: The unique identifier of the user.
            start: Inclusive lower bound, timezone aware.
            end: Exclusive upper bound, timezone aware.

        Returns:
            list[ReadingSessionRecord]: Matching sessions.
        """
        ...
