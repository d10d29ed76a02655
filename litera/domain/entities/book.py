"""Book entities for the Litera application."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Book(BaseModel):
    """Catalog entry for a book, usually imported from Google Books."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    google_books_id: Optional[str] = Field(None, description="Google Books volume id")
    title: str = Field(min_length=1, max_length=500)
    author: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    page_count: Optional[int] = Field(None, ge=0)
    published_date: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    isbn: Optional[str] = None
    average_rating: float = Field(default=0.0, ge=0, le=5)
    total_ratings: int = Field(default=0, ge=0)
    created_by: Optional[str] = None


class ReadingStatus(str, Enum):
    """Shelf a book sits on in a user's library."""

    READING = "reading"
    READ = "read"
    WANT_TO_READ = "want_to_read"


class UserBook(BaseModel):
    """A book in a user's personal library, with their bookmark and rating."""

    user_id: str
    book_id: str
    status: ReadingStatus
    current_page: int = Field(default=0, ge=0)
    rating: Optional[int] = Field(None, ge=1, le=5)
    review: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
