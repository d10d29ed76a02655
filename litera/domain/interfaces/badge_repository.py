"""Badge repository protocol."""

from typing import Optional, Protocol, runtime_checkable

from ..entities.badge import Badge, UserBadge


class BadgeAlreadyAwardedError(Exception):
    """Raised when a (user, badge) pair is already stored."""

    def __init__(self, user_id: str, badge_id: str):
        super().__init__(f"User {user_id} already holds badge {badge_id}")
        self.user_id = user_id
        self.badge_id = badge_id


@runtime_checkable
class BadgeRepository(Protocol):
    """Protocol for the badge catalog and the badges users hold."""

    async def get_badge_by_name(self, name: str) -> Optional[Badge]:
        """Look up a catalog badge by its name, or None if absent."""
        ...

    async def save_badge(self, badge: Badge) -> None:
        """Add or replace a catalog badge."""
        ...

    async def has_badge(self, user_id: str, badge_id: str) -> bool:
        """Check whether the user already holds the badge."""
        ...

    async def award_badge(self, user_badge: UserBadge) -> None:
        """Store a user badge.

        Raises:
            BadgeAlreadyAwardedError: If the user already holds the badge.
        """
        ...

    async def list_user_badges(self, user_id: str) -> list[UserBadge]:
        """List the badges a user holds."""
        ...
