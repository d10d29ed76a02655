"""Domain entities for the Litera application."""

from .badge import Badge, UserBadge
from .book import Book, ReadingStatus, UserBook
from .context import UserContext
from .post import Post, PostType
from .profile import Profile, ReaderLevel
from .reading_session import ActiveSession, ReadingSessionRecord, SessionOutcome

__all__ = [
    # Session entities
    "ActiveSession",
    "ReadingSessionRecord",
    "SessionOutcome",
    # Profile entities
    "Profile",
    "ReaderLevel",
    # Badge entities
    "Badge",
    "UserBadge",
    # Book entities
    "Book",
    "UserBook",
    "ReadingStatus",
    # Feed entities
    "Post",
    "PostType",
    # Context
    "UserContext",
]
