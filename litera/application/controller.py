"""Litera controller for wiring providers and coordinating operations."""

import logging
from typing import Any, Dict, Optional

from ..domain.entities import (
    ActiveSession,
    Book,
    Post,
    ReadingStatus,
    SessionOutcome,
    UserBook,
    UserContext,
)
from ..domain.entities.profile import Profile
from ..domain.interfaces.badge_repository import BadgeRepository
from ..domain.interfaces.book_repository import BookRepository, UserBookRepository
from ..domain.interfaces.book_search_provider import BookSearchProvider
from ..domain.interfaces.post_repository import PostRepository
from ..domain.interfaces.profile_repository import ProfileRepository
from ..domain.interfaces.session_repository import SessionRepository
from ..domain.services import (
    BadgeAwarder,
    BookCatalogService,
    LibraryService,
    ReadingSessionTracker,
    StreakRecoveryService,
    can_recover,
)
from ..domain.services.reader_levels import get_level_config, level_progress, next_level
from ..domain.services.streak import DEFAULT_MIN_MINUTES
from ..infrastructure import (
    DynamoDBBadgeRepository,
    DynamoDBBookRepository,
    DynamoDBPostRepository,
    DynamoDBProfileRepository,
    DynamoDBSessionRepository,
    DynamoDBUserBookRepository,
    GoogleBooksClient,
    LocalBadgeRepository,
    LocalBookRepository,
    LocalPostRepository,
    LocalProfileRepository,
    LocalSessionRepository,
    LocalUserBookRepository,
)
from .config import Settings

logger = logging.getLogger(__name__)


class LiteraController:
    """
    Controller for coordinating Litera operations.

    This controller is injected with all necessary providers and handles
    the business logic for each endpoint, keeping the API layer thin. It
    keeps a session tracker for each user with a session in progress.
    """

    def __init__(
        self,
        profile_repository: ProfileRepository,
        session_repository: SessionRepository,
        badge_repository: BadgeRepository,
        post_repository: PostRepository,
        book_repository: BookRepository,
        user_book_repository: UserBookRepository,
        search_provider: BookSearchProvider,
        streak_min_minutes: int = DEFAULT_MIN_MINUTES,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            profile_repository: Store for user profiles
            session_repository: Store for finished reading sessions
            badge_repository: Badge catalog and user badges
            post_repository: Store for feed posts
            book_repository: Shared book catalog
            user_book_repository: Users' personal libraries
            search_provider: External book search
            streak_min_minutes: Daily reading minutes needed to count a streak day
        """
        self.profile_repository = profile_repository
        self.session_repository = session_repository
        self.badge_repository = badge_repository
        self.post_repository = post_repository
        self.book_repository = book_repository
        self.user_book_repository = user_book_repository
        self.search_provider = search_provider
        self.streak_min_minutes = streak_min_minutes

        self.badge_awarder = BadgeAwarder(badge_repository)
        self.recovery_service = StreakRecoveryService(profile_repository)
        self.library_service = LibraryService(
            user_book_repository, book_repository, post_repository, profile_repository
        )
        self.catalog_service = BookCatalogService(book_repository, search_provider)

        self._trackers: Dict[str, ReadingSessionTracker] = {}

        logger.info("LiteraController initialized with providers")

    def tracker_for(self, context: UserContext) -> ReadingSessionTracker:
        """
        Get the session tracker of a logged-in user, creating it on first use.

        The tracker picks up the latest context so time zone changes apply.
        Trackers are dropped again once their session ends or is cancelled.
        """
        tracker = self._trackers.get(context.user_id)
        if tracker is None:
            tracker = ReadingSessionTracker(
                context=context,
                profile_repository=self.profile_repository,
                session_repository=self.session_repository,
                user_book_repository=self.user_book_repository,
                post_repository=self.post_repository,
                badge_awarder=self.badge_awarder,
                min_minutes=self.streak_min_minutes,
            )
            self._trackers[context.user_id] = tracker
        else:
            tracker.context = context
        return tracker

    def active_session_for(self, context: UserContext) -> Optional[ActiveSession]:
        """Get the user's session in progress without creating a tracker."""
        tracker = self._trackers.get(context.user_id)
        return tracker.active_session if tracker else None

    def _release_tracker(self, user_id: str) -> None:
        # A tracker whose end failed keeps its session for the retry
        tracker = self._trackers.get(user_id)
        if tracker is not None and tracker.active_session is None:
            del self._trackers[user_id]

    async def start_session(self, context: UserContext, book_id: str, current_page: int):
        session = await self.tracker_for(context).start_session(book_id, current_page)
        if session is None:
            self._release_tracker(context.user_id)
        return session

    async def end_session(
        self, context: UserContext, end_page: int, notes: Optional[str] = None
    ) -> Optional[SessionOutcome]:
        if context.user_id not in self._trackers:
            return None
        outcome = await self.tracker_for(context).end_session(end_page, notes)
        self._release_tracker(context.user_id)
        return outcome

    async def cancel_session(self, context: UserContext) -> bool:
        try:
            return await self.tracker_for(context).cancel_session()
        finally:
            self._release_tracker(context.user_id)

    async def create_profile(
        self, context: UserContext, username: str, display_name: Optional[str] = None
    ) -> Optional[Profile]:
        """
        Create the caller's profile.

        Returns:
            The new profile, or None if the user already has one.
        """
        try:
            await self.profile_repository.get_profile(context.user_id)
        except ValueError:
            profile = Profile(id=context.user_id, username=username, display_name=display_name)
            await self.profile_repository.save_profile(profile)
            logger.info(f"Created profile for user {context.user_id}")
            return profile

        logger.warning(f"Profile for user {context.user_id} already exists")
        return None

    async def list_posts(self, user_id: str) -> list[Post]:
        return await self.post_repository.list_posts(user_id)

    async def recover_streak(self, context: UserContext) -> Optional[Profile]:
        return await self.recovery_service.recover_streak(context)

    async def get_profile_summary(self, user_id: str) -> Dict[str, Any]:
        """
        Get a profile with its recovery eligibility, level progress and badges.

        Raises:
            ValueError: If the profile is not found.
        """
        profile = await self.profile_repository.get_profile(user_id)
        target = next_level(profile.reader_level)
        badges = await self.badge_repository.list_user_badges(user_id)

        return {
            "profile": profile.model_dump(mode="json"),
            "can_recover": can_recover(profile),
            "level": get_level_config(profile.reader_level).label,
            "next_level": target.label if target else None,
            "level_progress": level_progress(profile, target) if target else None,
            "badges": [badge.model_dump(mode="json") for badge in badges],
        }

    async def search_books(self, query: str) -> list:
        return await self.catalog_service.search(query)

    async def import_book(self, context: UserContext, volume: Dict[str, Any]) -> Optional[Book]:
        return await self.catalog_service.import_volume(volume, context.user_id)

    async def add_to_library(
        self, context: UserContext, book_id: str, status: ReadingStatus
    ) -> Optional[UserBook]:
        """
        Shelve a catalog book for the user.

        Raises:
            ValueError: If the book is not in the catalog.
        """
        book = await self.book_repository.get_book(book_id)
        return await self.library_service.add_to_list(context, book, status)

    async def rate_book(
        self, context: UserContext, book_id: str, rating: int, review: Optional[str] = None
    ) -> bool:
        return await self.library_service.rate_book(context, book_id, rating, review)

    async def remove_book(self, context: UserContext, book_id: str) -> bool:
        return await self.library_service.remove_book(context, book_id)

    async def list_library(self, user_id: str) -> list[UserBook]:
        return await self.library_service.list_books(user_id)

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "providers": {
                "profile_repository": type(self.profile_repository).__name__,
                "session_repository": type(self.session_repository).__name__,
                "badge_repository": type(self.badge_repository).__name__,
                "post_repository": type(self.post_repository).__name__,
                "book_repository": type(self.book_repository).__name__,
                "user_book_repository": type(self.user_book_repository).__name__,
                "search_provider": type(self.search_provider).__name__,
            },
            "active_sessions": sum(
                1 for tracker in self._trackers.values() if tracker.active_session is not None
            ),
        }


def build_controller(settings: Settings) -> LiteraController:
    """Create a controller wired to the storage backend named in settings."""
    search_provider = GoogleBooksClient(
        base_url=settings.google_books_base_url,
        api_key=settings.google_books_api_key,
        cache_ttl=settings.google_books_cache_ttl,
        max_cache_entries=settings.google_books_cache_size,
        max_retries=settings.google_books_max_retries,
        backoff_seconds=settings.google_books_backoff_seconds,
        timeout=settings.google_books_timeout,
    )

    if settings.storage_backend == "dynamodb":
        region = settings.aws_region
        repositories = dict(
            profile_repository=DynamoDBProfileRepository(settings.profiles_table_name, region),
            session_repository=DynamoDBSessionRepository(settings.sessions_table_name, region),
            badge_repository=DynamoDBBadgeRepository(
                settings.badges_table_name, settings.user_badges_table_name, region
            ),
            post_repository=DynamoDBPostRepository(settings.posts_table_name, region),
            book_repository=DynamoDBBookRepository(settings.books_table_name, region),
            user_book_repository=DynamoDBUserBookRepository(settings.user_books_table_name, region),
        )
    elif settings.storage_backend == "local":
        repositories = dict(
            profile_repository=LocalProfileRepository(),
            session_repository=LocalSessionRepository(),
            badge_repository=LocalBadgeRepository(),
            post_repository=LocalPostRepository(),
            book_repository=LocalBookRepository(),
            user_book_repository=LocalUserBookRepository(),
        )
    else:
        raise ValueError(f"Unknown storage backend '{settings.storage_backend}'")

    logger.info(f"Using {settings.storage_backend} storage backend")
    return LiteraController(
        search_provider=search_provider,
        streak_min_minutes=settings.streak_min_minutes,
        **repositories,
    )
