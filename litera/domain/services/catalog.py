"""Book catalog: searching Google Books and importing volumes."""

import logging
from typing import Any, Optional

from ..entities.book import Book
from ..interfaces.book_repository import BookRepository
from ..interfaces.book_search_provider import BookSearchProvider

logger = logging.getLogger(__name__)


def _extract_isbn(identifiers: list[dict[str, Any]]) -> Optional[str]:
    for identifier in identifiers:
        if identifier.get("type") in ("ISBN_13", "ISBN_10"):
            return identifier.get("identifier")
    return None


def volume_to_book(volume: dict[str, Any], user_id: Optional[str] = None) -> Book:
    """Map a Google Books volume record to a catalog book."""
    info = volume.get("volumeInfo", {})
    thumbnail = info.get("imageLinks", {}).get("thumbnail")
    authors = info.get("authors") or []

    return Book(
        google_books_id=volume.get("id"),
        title=info.get("title") or "Untitled",
        author=", ".join(authors) or None,
        description=info.get("description"),
        cover_url=thumbnail.replace("http:", "https:") if thumbnail else None,
        page_count=info.get("pageCount"),
        published_date=info.get("publishedDate"),
        categories=info.get("categories") or [],
        isbn=_extract_isbn(info.get("industryIdentifiers", [])),
        created_by=user_id,
    )


class BookCatalogService:
    """Finds books on Google Books and adds them to the shared catalog."""

    def __init__(self, book_repository: BookRepository, search_provider: BookSearchProvider):
        self.book_repository = book_repository
        self.search_provider = search_provider

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Search Google Books. Blank queries return nothing."""
        if not query.strip():
            return []
        return await self.search_provider.search(query)

    async def import_volume(self, volume: dict[str, Any], user_id: str) -> Optional[Book]:
        """Add a volume to the catalog, reusing the existing entry if it was imported before.

        Returns:
            The catalog book, or None if the store failed.
        """
        try:
            google_id = volume.get("id")
            if google_id:
                existing = await self.book_repository.find_by_google_id(google_id)
                if existing:
                    return existing

            book = volume_to_book(volume, user_id)
            await self.book_repository.save_book(book)
        except Exception as e:
            logger.error(f"Error importing volume {volume.get('id')}: {e}", exc_info=True)
            return None

        logger.info(f"Imported '{book.title}' as book {book.id}")
        return book
