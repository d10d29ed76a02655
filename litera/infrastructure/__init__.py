"""Infrastructure layer components."""

from .dynamodb_badge_repository import DynamoDBBadgeRepository
from .dynamodb_book_repository import DynamoDBBookRepository, DynamoDBUserBookRepository
from .dynamodb_post_repository import DynamoDBPostRepository
from .dynamodb_profile_repository import DynamoDBProfileRepository
from .dynamodb_session_repository import DynamoDBSessionRepository
from .google_books_client import GoogleBooksClient
from .local_badge_repository import LocalBadgeRepository
from .local_book_repository import LocalBookRepository, LocalUserBookRepository
from .local_post_repository import LocalPostRepository
from .local_profile_repository import LocalProfileRepository
from .local_session_repository import LocalSessionRepository

__all__ = [
    "DynamoDBBadgeRepository",
    "DynamoDBBookRepository",
    "DynamoDBPostRepository",
    "DynamoDBProfileRepository",
    "DynamoDBSessionRepository",
    "DynamoDBUserBookRepository",
    "GoogleBooksClient",
    "LocalBadgeRepository",
    "LocalBookRepository",
    "LocalPostRepository",
    "LocalProfileRepository",
    "LocalSessionRepository",
    "LocalUserBookRepository",
]
