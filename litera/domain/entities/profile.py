"""Profile entities for the Litera application."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReaderLevel(str, Enum):
    """Reader levels, ordered from newcomer to most experienced."""

    BEGINNER = "beginner"
    READER = "reader"
    AVID_READER = "avid_reader"
    DEVOURER = "devourer"
    MASTER = "master"


class Profile(BaseModel):
    """Profile entity holding reading totals and streak state for a user."""

    id: str
    username: str = Field(min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)
    reader_level: ReaderLevel = ReaderLevel.BEGINNER

    total_pages_read: int = Field(default=0, ge=0)
    total_books_read: int = Field(default=0, ge=0)
    total_reading_time: int = Field(default=0, ge=0, description="Total reading time in minutes")

    streak_days: int = Field(default=0, ge=0)
    last_reading_date: Optional[date] = None
    last_broken_streak: int = Field(default=0, ge=0)
    consecutive_recoveries: int = Field(default=0, ge=0, le=1)
    last_recovery_date: Optional[date] = None

    is_reading_now: bool = False
    current_book_id: Optional[str] = None
    last_session_id: Optional[UUID] = Field(
        None, description="Last reading session whose totals were applied to this profile"
    )

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "user-123",
                "username": "bookworm",
                "display_name": "Book Worm",
                "reader_level": "reader",
                "total_pages_read": 320,
                "total_books_read": 2,
                "total_reading_time": 410,
                "streak_days": 6,
                "last_reading_date": "2026-01-12",
                "last_broken_streak": 0,
                "consecutive_recoveries": 0,
                "is_reading_now": False,
            }
        }
    )
