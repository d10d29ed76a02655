"""Local in-memory implementation of Session Repository."""

from datetime import datetime
from typing import Dict

from ..domain.entities.reading_session import ReadingSessionRecord
from ..domain.interfaces.session_repository import SessionRepository


class LocalSessionRepository(SessionRepository):
    """Local in-memory implementation of the Session Repository.

    Stores sessions in a dictionary for testing and development purposes.
    """

    def __init__(self):
        """Initialize the local session repository with an empty dictionary."""
        self._sessions: Dict[str, ReadingSessionRecord] = {}

    async def save_session(self, session: ReadingSessionRecord) -> None:
        """Save a session to the in-memory dictionary.

        Args:
            session: The session record to save.
        """
        self._sessions[str(session.id)] = session

    async def get_session(self, session_id: str) -> ReadingSessionRecord:
        """Retrieve a session by ID from the in-memory dictionary.

        Args:
            session_id: The unique identifier of the session.

        Returns:
            ReadingSessionRecord: The session record.

        Raises:
            ValueError: If the session is not found.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Session with id {session_id} not found")

        return self._sessions[session_id]

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
        matches = [
            session
            for session in self._sessions.values()
            if session.user_id == user_id and start <= session.started_at < end
        ]
        return sorted(matches, key=lambda session: session.started_at)

    def clear(self) -> None:
        """Clear all sessions from the dictionary."""
        self._sessions.clear()

    def get_all_sessions(self) -> Dict[str, ReadingSessionRecord]:
        """Get all sessions.

        Returns:
            Dict[str, ReadingSessionRecord]: Dictionary of all sessions.
        """
        return self._sessions.copy()
