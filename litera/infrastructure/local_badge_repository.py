"""Local in-memory implementation of BadgeRepository."""

from typing import Dict, Optional

from ..domain.entities.badge import Badge, UserBadge
from ..domain.interfaces.badge_repository import BadgeAlreadyAwardedError, BadgeRepository
from ..domain.services.badges import DEFAULT_BADGES


class LocalBadgeRepository(BadgeRepository):
    """In-memory badge catalog and user badges.

    The catalog starts with the default streak badges. User badges are
    keyed by (user_id, badge_id), which acts as the unique constraint.
    """

    def __init__(self, seed_defaults: bool = True):
        self._badges: Dict[str, Badge] = {}
        self._user_badges: Dict[tuple[str, str], UserBadge] = {}

        if seed_defaults:
            for badge in DEFAULT_BADGES:
                self._badges[badge.id] = badge

    async def get_badge_by_name(self, name: str) -> Optional[Badge]:
        for badge in self._badges.values():
            if badge.name == name:
                return badge
        return None

    async def save_badge(self, badge: Badge) -> None:
        self._badges[badge.id] = badge

    async def has_badge(self, user_id: str, badge_id: str) -> bool:
        return (user_id, badge_id) in self._user_badges

    async def award_badge(self, user_badge: UserBadge) -> None:
        """Store a user badge.

        Raises:
            BadgeAlreadyAwardedError: If the pair is already stored.
        """
        key = (user_badge.user_id, user_badge.badge_id)
        if key in self._user_badges:
            raise BadgeAlreadyAwardedError(user_badge.user_id, user_badge.badge_id)
        self._user_badges[key] = user_badge

    async def list_user_badges(self, user_id: str) -> list[UserBadge]:
        return [ub for (owner, _), ub in self._user_badges.items() if owner == user_id]

    def clear(self) -> None:
        """Clear catalog and user badges."""
        self._badges.clear()
        self._user_badges.clear()
