"""Badge awarding for streak milestones."""

import logging
from typing import Optional

from ..entities.badge import Badge, UserBadge
from ..interfaces.badge_repository import BadgeAlreadyAwardedError, BadgeRepository

logger = logging.getLogger(__name__)

STREAK_BADGES: dict[int, str] = {
    1: "Good Start",
    3: "Warming Up",
    7: "Dedicated Reader",
    14: "Committed Reader",
    30: "Iron Habit",
}

DEFAULT_BADGES: list[Badge] = [
    Badge(
        name="Good Start",
        description="Read for at least 10 minutes in a day.",
        icon="sprout",
        requirement_value=1,
    ),
    Badge(
        name="Warming Up",
        description="Kept a 3-day reading streak.",
        icon="flame",
        requirement_value=3,
    ),
    Badge(
        name="Dedicated Reader",
        description="Kept a 7-day reading streak.",
        icon="book-open",
        requirement_value=7,
    ),
    Badge(
        name="Committed Reader",
        description="Kept a 14-day reading streak.",
        icon="trophy",
        requirement_value=14,
    ),
    Badge(
        name="Iron Habit",
        description="Kept a 30-day reading streak.",
        icon="crown",
        requirement_value=30,
    ),
]


class BadgeAwarder:
    """Issues streak badges, at most once per user and badge."""

    def __init__(self, badge_repository: BadgeRepository):
        self.badge_repository = badge_repository

    async def award_for_streak(self, user_id: str, streak_days: int) -> Optional[Badge]:
        """Award the badge for a streak length if one exists and is new.

        Args:
            user_id: The user who reached the streak.
            streak_days: The streak length just computed.

        Returns:
            The newly awarded badge, or None. Lookup and store failures
            are logged and also yield None.
        """
        badge_name = STREAK_BADGES.get(streak_days)
        if badge_name is None:
            return None

        try:
            badge = await self.badge_repository.get_badge_by_name(badge_name)
            if badge is None:
                logger.warning(f"Badge '{badge_name}' missing from catalog, skipping award")
                return None

            if await self.badge_repository.has_badge(user_id, badge.id):
                logger.debug(f"User {user_id} already holds badge '{badge_name}'")
                return None

            await self.badge_repository.award_badge(UserBadge(user_id=user_id, badge_id=badge.id))
        except BadgeAlreadyAwardedError:
            logger.info(f"Badge '{badge_name}' was awarded to {user_id} concurrently")
            return None
        except Exception as e:
            logger.error(f"Error awarding badge '{badge_name}' to {user_id}: {e}", exc_info=True)
            return None

        logger.info(f"Awarded badge '{badge_name}' to user {user_id}")
        return badge
