"""One-time streak recovery."""

import logging
from typing import Optional

from ..entities.context import UserContext
from ..entities.profile import Profile
from ..interfaces.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


def can_recover(profile: Profile) -> bool:
    """Recovery is offered after a break, once, until the streak extends again."""
    return profile.last_broken_streak > 0 and profile.consecutive_recoveries == 0


class StreakRecoveryService:
    """Restores a broken streak on explicit user request."""

    def __init__(self, profile_repository: ProfileRepository):
        self.profile_repository = profile_repository

    async def recover_streak(self, context: UserContext) -> Optional[Profile]:
        """Add the last broken streak back onto the current one.

        Overwrites the streak fields directly; the streak calculator is
        not involved. Today is marked as read so the restored streak is
        not broken again by tomorrow's session.

        Returns:
            The updated profile, or None when recovery is not available
            or the store failed.
        """
        if not context.is_authenticated:
            return None

        try:
            profile = await self.profile_repository.get_profile(context.user_id)
            if not can_recover(profile):
                logger.info(f"Streak recovery not available for user {context.user_id}")
                return None

            today = context.today()
            recovered = profile.streak_days + profile.last_broken_streak
            updated = await self.profile_repository.update_profile(
                context.user_id,
                {
                    "streak_days": recovered,
                    "last_broken_streak": 0,
                    "consecutive_recoveries": 1,
                    "last_recovery_date": today,
                    "last_reading_date": today,
                },
            )
        except Exception as e:
            logger.error(f"Error recovering streak for user {context.user_id}: {e}", exc_info=True)
            return None

        logger.info(f"User {context.user_id} recovered a {recovered}-day streak")
        return updated
