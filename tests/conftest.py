"""
Shared pytest fixtures for Litera tests.

Provides in-memory repositories, a controllable clock and a signed-in
reader whose local time zone is three hours behind UTC.
"""

from datetime import datetime, timedelta, timezone

import pytest

from litera.domain.entities import Book, Profile, UserContext
from litera.domain.services import BadgeAwarder, ReadingSessionTracker
from litera.infrastructure import (
    LocalBadgeRepository,
    LocalBookRepository,
    LocalPostRepository,
    LocalProfileRepository,
    LocalSessionRepository,
    LocalUserBookRepository,
)

READER_ID = "reader-1"
READER_TZ = timezone(timedelta(hours=-3))


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)

    def set(self, now: datetime) -> None:
        self.current = now


@pytest.fixture
def clock():
    """Clock starting at 20:00 local time on 2026-03-10."""
    return FakeClock(datetime(2026, 3, 10, 20, 0, tzinfo=READER_TZ))


@pytest.fixture
def context(clock):
    return UserContext(user_id=READER_ID, tz=READER_TZ, clock=clock)


@pytest.fixture
def anonymous_context(clock):
    return UserContext(user_id=None, tz=READER_TZ, clock=clock)


@pytest.fixture
def profile_repository():
    repository = LocalProfileRepository()
    repository._profiles[READER_ID] = Profile(id=READER_ID, username="reader")
    return repository


@pytest.fixture
def session_repository():
    return LocalSessionRepository()


@pytest.fixture
def badge_repository():
    return LocalBadgeRepository()


@pytest.fixture
def post_repository():
    return LocalPostRepository()


@pytest.fixture
def book_repository():
    return LocalBookRepository()


@pytest.fixture
def user_book_repository():
    return LocalUserBookRepository()


@pytest.fixture
def sample_book():
    return Book(id="book-1", title="Dom Casmurro", author="Machado de Assis", page_count=256)


@pytest.fixture
def tracker(
    context,
    profile_repository,
    session_repository,
    user_book_repository,
    post_repository,
    badge_repository,
):
    return ReadingSessionTracker(
        context=context,
        profile_repository=profile_repository,
        session_repository=session_repository,
        user_book_repository=user_book_repository,
        post_repository=post_repository,
        badge_awarder=BadgeAwarder(badge_repository),
    )
