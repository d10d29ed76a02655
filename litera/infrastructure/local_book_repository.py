"""Local in-memory implementations of the book catalog and user libraries."""

from typing import Dict, Optional

from ..domain.entities.book import Book, UserBook
from ..domain.interfaces.book_repository import BookRepository, UserBookRepository


class LocalBookRepository(BookRepository):
    """Local in-memory implementation of the BookRepository protocol.

    Stores books in a dictionary for testing and development purposes.
    """

    def __init__(self):
        self._books: Dict[str, Book] = {}

    async def get_book(self, book_id: str) -> Book:
        """Retrieve a book by ID.

        Raises:
            ValueError: If the book is not found.
        """
        if book_id not in self._books:
            raise ValueError(f"Book with id {book_id} not found")

        return self._books[book_id]

    async def find_by_google_id(self, google_books_id: str) -> Optional[Book]:
        for book in self._books.values():
            if book.google_books_id == google_books_id:
                return book
        return None

    async def save_book(self, book: Book) -> None:
        self._books[book.id] = book

    def list_books(self) -> list[Book]:
        """List all books in the catalog."""
        return list(self._books.values())


class LocalUserBookRepository(UserBookRepository):
    """Stores user library entries keyed by (user_id, book_id)."""

    def __init__(self):
        self._entries: Dict[tuple[str, str], UserBook] = {}

    async def get_user_book(self, user_id: str, book_id: str) -> Optional[UserBook]:
        return self._entries.get((user_id, book_id))

    async def save_user_book(self, user_book: UserBook) -> None:
        self._entries[(user_book.user_id, user_book.book_id)] = user_book

    async def update_current_page(self, user_id: str, book_id: str, current_page: int) -> None:
        entry = self._entries.get((user_id, book_id))
        if entry is None:
            return
        self._entries[(user_id, book_id)] = entry.model_copy(update={"current_page": current_page})

    async def list_user_books(self, user_id: str) -> list[UserBook]:
        entries = [entry for (owner, _), entry in self._entries.items() if owner == user_id]
        return sorted(entries, key=lambda entry: entry.updated_at, reverse=True)

    async def list_ratings(self, book_id: str) -> list[int]:
        return [
            entry.rating
            for (_, entry_book_id), entry in self._entries.items()
            if entry_book_id == book_id and entry.rating is not None
        ]

    async def delete_user_book(self, user_id: str, book_id: str) -> None:
        """Remove an entry.

        Raises:
            ValueError: If the entry is not found.
        """
        if (user_id, book_id) not in self._entries:
            raise ValueError(f"Book {book_id} not found in library of {user_id}")

        del self._entries[(user_id, book_id)]
