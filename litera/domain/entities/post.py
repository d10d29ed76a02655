"""Feed post entities."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PostType(str, Enum):
    """Kinds of activity shown in the feed."""

    STARTED_READING = "started_reading"
    FINISHED_READING = "finished_reading"
    SESSION_UPDATE = "session_update"
    REVIEW = "review"
    MILESTONE = "milestone"
    GENERAL = "general"


class Post(BaseModel):
    """Activity post emitted by reading and library operations."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    book_id: Optional[str] = None
    reading_session_id: Optional[UUID] = None
    type: PostType = PostType.GENERAL
    content: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
