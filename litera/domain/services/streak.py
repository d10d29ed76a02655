"""Streak arithmetic over local calendar days.

A day counts towards a streak once the user's total reading time on that
local calendar day reaches a threshold. Several short sessions on the same
day add up. The functions here are pure; the session tracker feeds them
the profile, the user's local date and the day's total minutes, and writes
the result back with the rest of the profile update.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Iterable, Optional

from ..entities.profile import Profile
from ..entities.reading_session import ReadingSessionRecord

DEFAULT_MIN_MINUTES = 10


@dataclass(frozen=True)
class StreakUpdate:
    """Streak fields of a profile after a session has been accounted for."""

    streak_days: int
    last_reading_date: Optional[date]
    last_broken_streak: int
    consecutive_recoveries: int

    @classmethod
    def from_profile(cls, profile: Profile) -> "StreakUpdate":
        return cls(
            streak_days=profile.streak_days,
            last_reading_date=profile.last_reading_date,
            last_broken_streak=profile.last_broken_streak,
            consecutive_recoveries=profile.consecutive_recoveries,
        )

    def as_changes(self) -> dict[str, Any]:
        """Profile field changes for this update."""
        return {
            "streak_days": self.streak_days,
            "last_reading_date": self.last_reading_date,
            "last_broken_streak": self.last_broken_streak,
            "consecutive_recoveries": self.consecutive_recoveries,
        }


def local_day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` of a calendar day in the given time zone."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def total_minutes(
    sessions: Iterable[ReadingSessionRecord],
    current_minutes: int,
    exclude_id: Optional[object] = None,
) -> int:
    """Sum the day's earlier sessions with the session that just ended.

    ``exclude_id`` keeps the just-stored record from being counted twice.
    """
    earlier = sum(s.duration_minutes for s in sessions if s.id != exclude_id)
    return earlier + current_minutes


def compute_streak_update(
    profile: Profile,
    today: date,
    minutes_today: int,
    min_minutes: int = DEFAULT_MIN_MINUTES,
) -> StreakUpdate:
    """Decide whether today's reading extends, restarts or leaves the streak.

    Args:
        profile: Profile as it was before the session ended.
        today: The user's local calendar date.
        minutes_today: Total minutes read today, including the new session.
        min_minutes: Daily total needed for the day to count.

    Returns:
        StreakUpdate: The streak fields to persist. Unchanged when the
        threshold is not met or today has already been counted.
    """
    current = StreakUpdate.from_profile(profile)

    if minutes_today < min_minutes:
        return current
    if profile.last_reading_date == today:
        return current

    streak_days = profile.streak_days
    last_broken_streak = profile.last_broken_streak
    consecutive_recoveries = profile.consecutive_recoveries

    if profile.last_reading_date == today - timedelta(days=1):
        streak_days += 1
        # A natural extension re-enables recovery
        consecutive_recoveries = 0
    else:
        if streak_days > 0:
            last_broken_streak = streak_days
        streak_days = 1

    return StreakUpdate(
        streak_days=streak_days,
        last_reading_date=today,
        last_broken_streak=last_broken_streak,
        consecutive_recoveries=consecutive_recoveries,
    )
