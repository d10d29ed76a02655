"""Badge entities."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class Badge(BaseModel):
    """Static catalog entry for an achievement."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    icon: str = "award"
    requirement_type: str = "streak_days"
    requirement_value: int = Field(default=0, ge=0)


class UserBadge(BaseModel):
    """A badge held by a user. At most one per (user_id, badge_id)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    badge_id: str
    earned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
