"""Reading session entities for the Litera application."""

import uuid
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .badge import Badge


class ActiveSession(BaseModel):
    """A reading session in progress, held in memory until it ends.

    ``session_id`` is generated when reading starts and becomes the id of
    the stored record, so writing the same session twice is an overwrite.
    """

    session_id: UUID = Field(default_factory=uuid.uuid4)
    book_id: str
    start_page: int = Field(ge=0)
    start_time: datetime


class ReadingSessionRecord(BaseModel):
    """A finished reading session. Immutable once stored."""

    id: UUID = Field(default_factory=uuid.uuid4)
    user_id: str
    book_id: str
    start_page: int = Field(ge=0)
    end_page: int
    pages_read: int
    duration_minutes: int = Field(ge=0)
    notes: Optional[str] = None
    started_at: datetime
    ended_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "12345678-1234-5678-1234-567812345678",
                "user_id": "user-123",
                "book_id": "book-42",
                "start_page": 10,
                "end_page": 35,
                "pages_read": 25,
                "duration_minutes": 30,
                "notes": "Great chapter",
                "started_at": "2026-01-13T10:00:00+00:00",
            }
        },
    )


class SessionOutcome(BaseModel):
    """Result of ending a reading session."""

    session: ReadingSessionRecord
    new_badge: Optional[Badge] = None
