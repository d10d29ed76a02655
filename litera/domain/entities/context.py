"""Per-user request context."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Optional


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UserContext:
    """Who is acting, in which time zone, and what time it is for them.

    Passed explicitly to every service call. A context without a
    ``user_id`` is anonymous and services treat calls made with it as
    no-ops.
    """

    user_id: Optional[str]
    tz: tzinfo = timezone.utc
    clock: Callable[[], datetime] = field(default=_utc_now)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def now(self) -> datetime:
        """Current time in the user's time zone."""
        return self.clock().astimezone(self.tz)

    def today(self) -> date:
        """Current calendar date in the user's time zone."""
        return self.now().date()
