"""Personal library: shelving, rating and removing books."""

import logging
from typing import Optional

from ..entities.book import Book, ReadingStatus, UserBook
from ..entities.context import UserContext
from ..entities.post import Post, PostType
from ..interfaces.book_repository import BookRepository, UserBookRepository
from ..interfaces.post_repository import PostRepository
from ..interfaces.profile_repository import ProfileRepository
from .reader_levels import level_for

logger = logging.getLogger(__name__)


class LibraryService:
    """Manages the books a user is reading, has read, or wants to read."""

    def __init__(
        self,
        user_book_repository: UserBookRepository,
        book_repository: BookRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository,
    ):
        self.user_book_repository = user_book_repository
        self.book_repository = book_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def add_to_list(
        self, context: UserContext, book: Book, status: ReadingStatus
    ) -> Optional[UserBook]:
        """Put a book on one of the user's shelves.

        Moving a book onto ``reading`` or ``read`` posts to the feed, and
        finishing a book counts towards the user's books-read total.

        Returns:
            The stored entry, or None for an anonymous context or a store
            failure.
        """
        if not context.is_authenticated:
            return None

        user_id = context.user_id
        try:
            existing = await self.user_book_repository.get_user_book(user_id, book.id)
            previous_status = existing.status if existing else None
            now = context.now()
            current_page = existing.current_page if existing else 0

            if status == ReadingStatus.READING:
                started_at = (existing.started_at if existing else None) or now
                finished_at = None
            elif status == ReadingStatus.READ:
                started_at = existing.started_at if existing else None
                if existing and existing.status == ReadingStatus.READ and existing.finished_at:
                    finished_at = existing.finished_at
                else:
                    finished_at = now
                if book.page_count:
                    current_page = book.page_count
            else:
                started_at = None
                finished_at = None
                current_page = 0

            entry = UserBook(
                user_id=user_id,
                book_id=book.id,
                status=status,
                current_page=current_page,
                rating=existing.rating if existing else None,
                review=existing.review if existing else None,
                started_at=started_at,
                finished_at=finished_at,
                updated_at=now,
            )
            await self.user_book_repository.save_user_book(entry)

            if status != previous_status and status in (ReadingStatus.READING, ReadingStatus.READ):
                await self._post_status_change(user_id, book, status)

            if status == ReadingStatus.READ and previous_status != ReadingStatus.READ:
                await self._count_finished_book(user_id)
        except Exception as e:
            logger.error(f"Error adding book {book.id} to list for {user_id}: {e}", exc_info=True)
            return None

        logger.info(f"User {user_id} moved book {book.id} to {status.value}")
        return entry

    async def rate_book(
        self,
        context: UserContext,
        book_id: str,
        rating: int,
        review: Optional[str] = None,
    ) -> bool:
        """Rate a book in the user's library and publish the review.

        Recomputes the book's average rating and keeps a single review post
        per user and book, updating it on later ratings.
        """
        if not context.is_authenticated:
            return False

        user_id = context.user_id
        try:
            entry = await self.user_book_repository.get_user_book(user_id, book_id)
            if entry is None:
                raise ValueError(f"Book {book_id} is not in the library of {user_id}")

            update = {"rating": rating, "updated_at": context.now()}
            if review is not None:
                update["review"] = review
            await self.user_book_repository.save_user_book(entry.model_copy(update=update))

            ratings = await self.user_book_repository.list_ratings(book_id)
            average = sum(ratings) / len(ratings) if ratings else 0.0
            book = await self.book_repository.get_book(book_id)
            await self.book_repository.save_book(
                book.model_copy(update={"average_rating": average, "total_ratings": len(ratings)})
            )

            existing_post = await self.post_repository.find_post(user_id, book_id, PostType.REVIEW)
            if existing_post:
                post_update = {"rating": rating}
                if review is not None:
                    post_update["content"] = review
                await self.post_repository.save_post(existing_post.model_copy(update=post_update))
            else:
                await self.post_repository.save_post(
                    Post(
                        user_id=user_id,
                        book_id=book_id,
                        type=PostType.REVIEW,
                        content=review or "",
                        rating=rating,
                    )
                )
        except Exception as e:
            logger.error(f"Error rating book {book_id} for {user_id}: {e}", exc_info=True)
            return False

        return True

    async def remove_book(self, context: UserContext, book_id: str) -> bool:
        """Remove a book from the library, clearing the reading flag if it pointed there."""
        if not context.is_authenticated:
            return False

        user_id = context.user_id
        try:
            await self.user_book_repository.delete_user_book(user_id, book_id)

            profile = await self.profile_repository.get_profile(user_id)
            if profile.current_book_id == book_id:
                await self.profile_repository.update_profile(
                    user_id, {"is_reading_now": False, "current_book_id": None}
                )
        except Exception as e:
            logger.error(f"Error removing book {book_id} for {user_id}: {e}", exc_info=True)
            return False

        return True

    async def list_books(self, user_id: str) -> list[UserBook]:
        """List a user's library, most recently updated first."""
        try:
            return await self.user_book_repository.list_user_books(user_id)
        except Exception as e:
            logger.error(f"Error listing books for {user_id}: {e}", exc_info=True)
            return []

    async def _post_status_change(self, user_id: str, book: Book, status: ReadingStatus) -> None:
        if status == ReadingStatus.READING:
            post_type, content = PostType.STARTED_READING, f'Started reading "{book.title}"'
        else:
            post_type, content = PostType.FINISHED_READING, f'Finished reading "{book.title}"'
        await self.post_repository.save_post(
            Post(user_id=user_id, book_id=book.id, type=post_type, content=content)
        )

    async def _count_finished_book(self, user_id: str) -> None:
        profile = await self.profile_repository.get_profile(user_id)
        total_books_read = profile.total_books_read + 1
        await self.profile_repository.update_profile(
            user_id,
            {
                "total_books_read": total_books_read,
                "reader_level": level_for(profile.total_pages_read, total_books_read),
            },
        )
