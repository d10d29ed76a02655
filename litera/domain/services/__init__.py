"""Domain services."""

from .badges import BadgeAwarder
from .catalog import BookCatalogService
from .library import LibraryService
from .recovery import StreakRecoveryService, can_recover
from .session_tracker import ReadingSessionTracker

__all__ = [
    "BadgeAwarder",
    "BookCatalogService",
    "LibraryService",
    "ReadingSessionTracker",
    "StreakRecoveryService",
    "can_recover",
]
