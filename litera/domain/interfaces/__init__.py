"""Domain interfaces for the Litera application."""

from .badge_repository import BadgeAlreadyAwardedError, BadgeRepository
from .book_repository import BookRepository, UserBookRepository
from .book_search_provider import BookSearchProvider
from .post_repository import PostRepository
from .profile_repository import ProfileRepository
from .session_repository import SessionRepository

__all__ = [
    "BadgeAlreadyAwardedError",
    "BadgeRepository",
    "BookRepository",
    "BookSearchProvider",
    "PostRepository",
    "ProfileRepository",
    "SessionRepository",
    "UserBookRepository",
]
