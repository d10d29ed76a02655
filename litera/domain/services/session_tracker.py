"""Reading session tracking and end-of-session accounting."""

import logging
from typing import Optional

from ..entities.context import UserContext
from ..entities.post import Post, PostType
from ..entities.profile import Profile
from ..entities.reading_session import ActiveSession, ReadingSessionRecord, SessionOutcome
from ..interfaces.book_repository import UserBookRepository
from ..interfaces.post_repository import PostRepository
from ..interfaces.profile_repository import ProfileRepository
from ..interfaces.session_repository import SessionRepository
from .badges import BadgeAwarder
from .reader_levels import level_for
from .streak import (
    DEFAULT_MIN_MINUTES,
    StreakUpdate,
    compute_streak_update,
    local_day_bounds,
    total_minutes,
)

logger = logging.getLogger(__name__)


class ReadingSessionTracker:
    """
    Tracks the single in-progress reading session of one logged-in user.

    This tracker owns:
    - The active session (book, start page, start time), in memory only
    - The "reading now" flag on the profile
    - The end-of-session write sequence: session record, bookmark,
      totals and streak, badge, feed post

    The write sequence is not atomic. Each step is keyed so that calling
    ``end_session`` again after a partial failure completes the remaining
    steps without double counting: the record and post are stored under the
    active session's id, the record itself is built once and reused, and
    the profile remembers the last session whose
    totals it absorbed.
    """

    def __init__(
        self,
        context: UserContext,
        profile_repository: ProfileRepository,
        session_repository: SessionRepository,
        user_book_repository: UserBookRepository,
        post_repository: PostRepository,
        badge_awarder: BadgeAwarder,
        min_minutes: int = DEFAULT_MIN_MINUTES,
    ):
        self.context = context
        self.profile_repository = profile_repository
        self.session_repository = session_repository
        self.user_book_repository = user_book_repository
        self.post_repository = post_repository
        self.badge_awarder = badge_awarder
        self.min_minutes = min_minutes

        self.active_session: Optional[ActiveSession] = None
        self._pending_record: Optional[ReadingSessionRecord] = None

    async def start_session(self, book_id: str, current_page: int) -> Optional[ActiveSession]:
        """
        Start reading a book.

        Replaces any session already in progress without persisting it.

        Args:
            book_id: Book being read
            current_page: Page the reader starts from

        Returns:
            The new active session, or None for an anonymous context
        """
        if not self.context.is_authenticated:
            return None

        if self.active_session is not None:
            logger.warning(
                f"Discarding unfinished session {self.active_session.session_id} "
                f"for user {self.context.user_id}"
            )

        self._pending_record = None
        self.active_session = ActiveSession(
            book_id=book_id,
            start_page=current_page,
            start_time=self.context.now(),
        )
        logger.info(
            f"User {self.context.user_id} started reading {book_id} at page {current_page}"
        )

        try:
            await self.profile_repository.update_profile(
                self.context.user_id,
                {"is_reading_now": True, "current_book_id": book_id},
            )
        except Exception as e:
            logger.error(f"Error flagging user {self.context.user_id} as reading: {e}", exc_info=True)

        return self.active_session

    async def end_session(self, end_page: int, notes: Optional[str] = None) -> Optional[SessionOutcome]:
        """
        Finish the active session and account for it.

        The session record is built on the first call and reused by any
        retry, so a retry never changes the stored duration, pages or notes.

        Args:
            end_page: Page the reader stopped at
            notes: Optional notes, used as the feed post text

        Returns:
            The stored session and any newly awarded badge, or None when
            there is nothing to end or a store call failed. Failures are
            logged, not raised; the active session is kept so the call can
            be retried.
        """
        if not self.context.is_authenticated or self.active_session is None:
            return None

        active = self.active_session
        user_id = self.context.user_id

        try:
            record = self._pending_record
            if record is None or record.id != active.session_id:
                record = self._build_record(active, end_page, notes)
                self._pending_record = record
            else:
                logger.info(f"Retrying end of session {record.id} with its original record")

            await self.session_repository.save_session(record)

            await self.user_book_repository.update_current_page(user_id, record.book_id, record.end_page)

            profile = await self.profile_repository.get_profile(user_id)
            if profile.last_session_id == record.id:
                logger.info(f"Session {record.id} already applied to profile {user_id}")
                streak = StreakUpdate.from_profile(profile)
            else:
                streak = await self._update_streak(profile, record)
                await self._apply_to_profile(profile, record, streak)

            new_badge = await self.badge_awarder.award_for_streak(user_id, streak.streak_days)

            await self.post_repository.save_post(
                Post(
                    id=str(record.id),
                    user_id=user_id,
                    book_id=record.book_id,
                    reading_session_id=record.id,
                    type=PostType.SESSION_UPDATE,
                    content=record.notes
                    or f"Read {record.pages_read} pages in {record.duration_minutes} minutes!",
                    created_at=record.ended_at,
                )
            )
        except Exception as e:
            logger.error(f"Error ending session for user {user_id}: {e}", exc_info=True)
            return None

        self.active_session = None
        self._pending_record = None
        logger.info(
            f"Session {record.id} ended: {record.pages_read} pages in {record.duration_minutes} min, "
            f"streak {streak.streak_days}"
        )
        return SessionOutcome(session=record, new_badge=new_badge)

    async def cancel_session(self) -> bool:
        """
        Drop the active session without recording anything.

        Returns:
            False for an anonymous context, True otherwise
        """
        if not self.context.is_authenticated:
            return False

        try:
            await self.profile_repository.update_profile(
                self.context.user_id,
                {"is_reading_now": False, "current_book_id": None},
            )
        except Exception as e:
            logger.error(f"Error clearing reading flag for {self.context.user_id}: {e}", exc_info=True)
        finally:
            self.active_session = None
            self._pending_record = None

        return True

    def _build_record(
        self, active: ActiveSession, end_page: int, notes: Optional[str]
    ) -> ReadingSessionRecord:
        now = self.context.now()
        elapsed_minutes = (now - active.start_time).total_seconds() / 60
        return ReadingSessionRecord(
            id=active.session_id,
            user_id=self.context.user_id,
            book_id=active.book_id,
            start_page=active.start_page,
            end_page=end_page,
            pages_read=end_page - active.start_page,
            duration_minutes=max(0, int(elapsed_minutes + 0.5)),
            notes=notes,
            started_at=active.start_time,
            ended_at=now,
        )

    async def _update_streak(self, profile: Profile, record: ReadingSessionRecord) -> StreakUpdate:
        today = record.ended_at.astimezone(self.context.tz).date()
        start, end = local_day_bounds(today, self.context.tz)
        todays_sessions = await self.session_repository.list_sessions_between(
            record.user_id, start, end
        )
        minutes_today = total_minutes(todays_sessions, record.duration_minutes, exclude_id=record.id)
        logger.debug(f"User {record.user_id} read {minutes_today} min on {today}")

        return compute_streak_update(profile, today, minutes_today, self.min_minutes)

    async def _apply_to_profile(
        self, profile: Profile, record: ReadingSessionRecord, streak: StreakUpdate
    ) -> Profile:
        total_pages_read = max(0, profile.total_pages_read + record.pages_read)
        changes = {
            "is_reading_now": False,
            "current_book_id": None,
            "total_pages_read": total_pages_read,
            "total_reading_time": profile.total_reading_time + record.duration_minutes,
            "reader_level": level_for(total_pages_read, profile.total_books_read),
            "last_session_id": record.id,
            **streak.as_changes(),
        }
        return await self.profile_repository.update_profile(record.user_id, changes)
