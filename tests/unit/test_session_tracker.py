"""Tests for the reading session tracker."""

from datetime import date, datetime, timedelta

import pytest

from litera.domain.entities import PostType, Profile, ReadingStatus, UserBook
from litera.domain.services import BadgeAwarder, ReadingSessionTracker
from litera.infrastructure import LocalPostRepository

TODAY = date(2026, 3, 10)
YESTERDAY = date(2026, 3, 9)


async def save_reader(profile_repository, context, **kwargs) -> Profile:
    profile = Profile(id=context.user_id, username="reader", **kwargs)
    await profile_repository.save_profile(profile)
    return profile


async def read_for(tracker, clock, minutes, start_page=10, end_page=30, notes=None):
    await tracker.start_session("book-1", start_page)
    clock.advance(minutes=minutes)
    return await tracker.end_session(end_page, notes)


class FlakyPostRepository(LocalPostRepository):
    """Post store that fails its first write."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    async def save_post(self, post):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("post store unavailable")
        await super().save_post(post)


class TestStartSession:
    """Test cases for starting a session."""

    @pytest.mark.asyncio
    async def test_start_session_flags_profile(self, tracker, profile_repository, context, clock):
        session = await tracker.start_session("book-1", 42)

        assert session is not None
        assert session.book_id == "book-1"
        assert session.start_page == 42
        assert session.start_time == clock()
        assert tracker.active_session is session

        profile = await profile_repository.get_profile(context.user_id)
        assert profile.is_reading_now is True
        assert profile.current_book_id == "book-1"

    @pytest.mark.asyncio
    async def test_start_replaces_active_session(self, tracker):
        first = await tracker.start_session("book-1", 1)
        second = await tracker.start_session("book-2", 5)

        assert tracker.active_session is second
        assert second.session_id != first.session_id

    @pytest.mark.asyncio
    async def test_start_survives_profile_store_failure(self, tracker, profile_repository):
        profile_repository.clear()

        session = await tracker.start_session("book-1", 0)

        assert session is not None
        assert tracker.active_session is session


class TestEndSession:
    """Test cases for ending a session."""

    @pytest.mark.asyncio
    async def test_seventh_day_extends_streak_and_awards_badge(
        self, tracker, profile_repository, badge_repository, context, clock
    ):
        await save_reader(profile_repository, context, streak_days=6, last_reading_date=YESTERDAY)

        outcome = await read_for(tracker, clock, 15)

        assert outcome is not None
        assert outcome.session.duration_minutes == 15
        assert outcome.session.pages_read == 20
        assert outcome.new_badge is not None
        assert outcome.new_badge.name == "Dedicated Reader"

        profile = await profile_repository.get_profile(context.user_id)
        assert profile.streak_days == 7
        assert profile.last_reading_date == TODAY
        assert profile.total_pages_read == 20
        assert profile.total_reading_time == 15
        assert profile.is_reading_now is False
        assert profile.current_book_id is None

        badges = await badge_repository.list_user_badges(context.user_id)
        assert len(badges) == 1

    @pytest.mark.asyncio
    async def test_badge_already_held_is_not_awarded_again(
        self, tracker, profile_repository, badge_repository, context, clock
    ):
        await save_reader(profile_repository, context, streak_days=6, last_reading_date=YESTERDAY)
        await read_for(tracker, clock, 15)

        # Same streak length reached again after a reset
        await profile_repository.update_profile(
            context.user_id, {"streak_days": 6, "last_reading_date": TODAY}
        )
        clock.advance(days=1)
        outcome = await read_for(tracker, clock, 15)

        assert outcome.new_badge is None
        assert len(await badge_repository.list_user_badges(context.user_id)) == 1

    @pytest.mark.asyncio
    async def test_gap_breaks_streak(self, tracker, profile_repository, context, clock):
        await save_reader(
            profile_repository, context, streak_days=4, last_reading_date=date(2026, 3, 7)
        )

        outcome = await read_for(tracker, clock, 12)

        assert outcome.new_badge is not None
        assert outcome.new_badge.name == "Good Start"
        profile = await profile_repository.get_profile(context.user_id)
        assert profile.streak_days == 1
        assert profile.last_broken_streak == 4

    @pytest.mark.asyncio
    async def test_short_sessions_add_up_within_a_day(
        self, tracker, profile_repository, context, clock
    ):
        await save_reader(profile_repository, context, streak_days=2, last_reading_date=YESTERDAY)

        first = await read_for(tracker, clock, 4)
        profile = await profile_repository.get_profile(context.user_id)
        assert first is not None
        assert profile.streak_days == 2
        assert profile.last_reading_date == YESTERDAY

        clock.advance(minutes=30)
        second = await read_for(tracker, clock, 7, start_page=30, end_page=40)
        profile = await profile_repository.get_profile(context.user_id)
        assert second is not None
        assert profile.streak_days == 3
        assert profile.last_reading_date == TODAY
        assert profile.total_reading_time == 11

    @pytest.mark.asyncio
    async def test_day_is_counted_once(self, tracker, profile_repository, context, clock):
        await save_reader(profile_repository, context, streak_days=2, last_reading_date=YESTERDAY)

        await read_for(tracker, clock, 20)
        clock.advance(minutes=10)
        await read_for(tracker, clock, 20, start_page=30, end_page=50)

        profile = await profile_repository.get_profile(context.user_id)
        assert profile.streak_days == 3
        assert profile.total_reading_time == 40
        assert profile.total_pages_read == 40

    @pytest.mark.asyncio
    async def test_below_threshold_leaves_streak_alone(
        self, tracker, profile_repository, context, clock
    ):
        await save_reader(profile_repository, context, streak_days=5, last_reading_date=YESTERDAY)

        outcome = await read_for(tracker, clock, 9)

        assert outcome.new_badge is None
        profile = await profile_repository.get_profile(context.user_id)
        assert profile.streak_days == 5
        assert profile.last_reading_date == YESTERDAY
        assert profile.total_reading_time == 9

    @pytest.mark.asyncio
    async def test_day_boundary_uses_reader_time_zone(
        self, tracker, profile_repository, context, clock
    ):
        """A late evening session is still the same local day after UTC midnight."""
        await save_reader(profile_repository, context, streak_days=1, last_reading_date=YESTERDAY)

        await read_for(tracker, clock, 4)
        clock.set(datetime(2026, 3, 10, 23, 30, tzinfo=context.tz))
        await read_for(tracker, clock, 7, start_page=30, end_page=45)

        profile = await profile_repository.get_profile(context.user_id)
        assert profile.streak_days == 2
        assert profile.last_reading_date == TODAY

    @pytest.mark.parametrize("seconds,minutes", [(29, 0), (90, 2), (149, 2)])
    @pytest.mark.asyncio
    async def test_duration_rounds_to_nearest_minute(self, tracker, clock, seconds, minutes):
        await tracker.start_session("book-1", 0)
        clock.advance(seconds=seconds)

        outcome = await tracker.end_session(3)

        assert outcome.session.duration_minutes == minutes

    @pytest.mark.asyncio
    async def test_posts_session_update(self, tracker, post_repository, context, clock):
        outcome = await read_for(tracker, clock, 15)

        posts = await post_repository.list_posts(context.user_id)
        assert len(posts) == 1
        assert posts[0].id == str(outcome.session.id)
        assert posts[0].type == PostType.SESSION_UPDATE
        assert posts[0].reading_session_id == outcome.session.id
        assert posts[0].content == "Read 20 pages in 15 minutes!"

    @pytest.mark.asyncio
    async def test_notes_become_post_content(self, tracker, post_repository, context, clock):
        await read_for(tracker, clock, 15, notes="What an ending")

        posts = await post_repository.list_posts(context.user_id)
        assert posts[0].content == "What an ending"

    @pytest.mark.asyncio
    async def test_moves_bookmark(self, tracker, user_book_repository, context, clock):
        await user_book_repository.save_user_book(
            UserBook(
                user_id=context.user_id,
                book_id="book-1",
                status=ReadingStatus.READING,
                current_page=10,
            )
        )

        await read_for(tracker, clock, 15, start_page=10, end_page=64)

        entry = await user_book_repository.get_user_book(context.user_id, "book-1")
        assert entry.current_page == 64

    @pytest.mark.asyncio
    async def test_updates_reader_level(self, tracker, profile_repository, context, clock):
        await save_reader(profile_repository, context, total_pages_read=90)

        await read_for(tracker, clock, 15, start_page=0, end_page=20)

        profile = await profile_repository.get_profile(context.user_id)
        assert profile.total_pages_read == 110
        assert profile.reader_level.value == "reader"

    @pytest.mark.asyncio
    async def test_stores_session_record(self, tracker, session_repository, clock):
        outcome = await read_for(tracker, clock, 15, notes="Chapter 3")

        stored = await session_repository.get_session(str(outcome.session.id))
        assert stored.notes == "Chapter 3"
        assert stored.end_page == 30
        assert stored.ended_at - stored.started_at == timedelta(minutes=15)

    @pytest.mark.asyncio
    async def test_without_active_session_returns_none(self, tracker):
        assert await tracker.end_session(10) is None

    @pytest.mark.asyncio
    async def test_failure_keeps_session_for_retry(self, tracker, profile_repository, clock):
        await tracker.start_session("book-1", 0)
        profile_repository.clear()
        clock.advance(minutes=15)

        assert await tracker.end_session(20) is None
        assert tracker.active_session is not None

    @pytest.mark.asyncio
    async def test_retry_after_partial_failure_counts_once(
        self,
        context,
        clock,
        profile_repository,
        session_repository,
        user_book_repository,
        badge_repository,
    ):
        posts = FlakyPostRepository()
        tracker = ReadingSessionTracker(
            context=context,
            profile_repository=profile_repository,
            session_repository=session_repository,
            user_book_repository=user_book_repository,
            post_repository=posts,
            badge_awarder=BadgeAwarder(badge_repository),
        )
        await save_reader(profile_repository, context, streak_days=6, last_reading_date=YESTERDAY)

        await tracker.start_session("book-1", 10)
        clock.advance(minutes=15)
        assert await tracker.end_session(30, notes="First try") is None

        clock.advance(minutes=30)
        outcome = await tracker.end_session(45, notes="Second try")

        assert outcome is not None
        assert tracker.active_session is None
        profile = await profile_repository.get_profile(context.user_id)
        assert profile.streak_days == 7
        assert profile.total_pages_read == 20
        assert profile.total_reading_time == 15
        assert profile.last_session_id == outcome.session.id
        assert len(session_repository.get_all_sessions()) == 1
        assert len(posts.get_all_posts()) == 1
        assert len(await badge_repository.list_user_badges(context.user_id)) == 1
        stored = session_repository.get_all_sessions()[str(outcome.session.id)]
        assert stored.duration_minutes == profile.total_reading_time == 15
        assert stored.pages_read == profile.total_pages_read == 20
        assert stored.notes == "First try"
        assert posts.get_all_posts()[str(outcome.session.id)].content == "First try"


class TestCancelSession:
    """Test cases for cancelling a session."""

    @pytest.mark.asyncio
    async def test_cancel_clears_session_and_flags(
        self, tracker, profile_repository, session_repository, context
    ):
        await tracker.start_session("book-1", 3)

        assert await tracker.cancel_session() is True

        assert tracker.active_session is None
        assert session_repository.get_all_sessions() == {}
        profile = await profile_repository.get_profile(context.user_id)
        assert profile.is_reading_now is False
        assert profile.current_book_id is None

    @pytest.mark.asyncio
    async def test_cancel_clears_session_even_if_store_fails(self, tracker, profile_repository):
        await tracker.start_session("book-1", 3)
        profile_repository.clear()

        assert await tracker.cancel_session() is True
        assert tracker.active_session is None


class TestAnonymousContext:
    """Calls without a signed-in user do nothing."""

    @pytest.fixture
    def anonymous_tracker(
        self,
        anonymous_context,
        profile_repository,
        session_repository,
        user_book_repository,
        post_repository,
        badge_repository,
    ):
        return ReadingSessionTracker(
            context=anonymous_context,
            profile_repository=profile_repository,
            session_repository=session_repository,
            user_book_repository=user_book_repository,
            post_repository=post_repository,
            badge_awarder=BadgeAwarder(badge_repository),
        )

    @pytest.mark.asyncio
    async def test_start_is_noop(self, anonymous_tracker):
        assert await anonymous_tracker.start_session("book-1", 0) is None
        assert anonymous_tracker.active_session is None

    @pytest.mark.asyncio
    async def test_end_is_noop(self, anonymous_tracker, session_repository):
        assert await anonymous_tracker.end_session(10) is None
        assert session_repository.get_all_sessions() == {}

    @pytest.mark.asyncio
    async def test_cancel_is_noop(self, anonymous_tracker):
        assert await anonymous_tracker.cancel_session() is False
