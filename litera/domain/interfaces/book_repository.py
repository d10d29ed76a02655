"""Book catalog and user library protocols."""

from typing import Optional, Protocol, runtime_checkable

from ..entities.book import Book, UserBook


@runtime_checkable
class BookRepository(Protocol):
    """Protocol for the shared book catalog.

    This interface defines methods for retrieving and storing books.
    Implementations can use different storage backends.
    """

    async def get_book(self, book_id: str) -> Book:
        """Retrieve a book by ID.

        Args:
            book_id: The unique identifier of the book.

        Returns:
            Book: The book entity.

        Raises:
            ValueError: If the book is not found.
        """
        ...

    async def find_by_google_id(self, google_books_id: str) -> Optional[Book]:
        """Return the catalog book imported from a Google Books volume, if any."""
        ...

    async def save_book(self, book: Book) -> None:
        """Create or replace a catalog book."""
        ...


@runtime_checkable
class UserBookRepository(Protocol):
    """Protocol for users' personal libraries."""

    async def get_user_book(self, user_id: str, book_id: str) -> Optional[UserBook]:
        """Return the user's entry for a book, or None."""
        ...

    async def save_user_book(self, user_book: UserBook) -> None:
        """Upsert an entry keyed by (user_id, book_id)."""
        ...

    async def update_current_page(self, user_id: str, book_id: str, current_page: int) -> None:
        """Move the bookmark of an existing entry. Missing entries are left alone."""
        ...

    async def list_user_books(self, user_id: str) -> list[UserBook]:
        """List a user's entries, most recently updated first."""
        ...

    async def list_ratings(self, book_id: str) -> list[int]:
        """List every user rating given to a book."""
        ...

    async def delete_user_book(self, user_id: str, book_id: str) -> None:
        """Remove an entry.

        Raises:
            ValueError: If the entry is not found.
        """
        ...
