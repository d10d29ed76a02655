"""Reader level thresholds and progress."""

from dataclasses import dataclass
from typing import Optional

from ..entities.profile import Profile, ReaderLevel


@dataclass(frozen=True)
class LevelConfig:
    """Minimums for a reader level. Meeting either one unlocks it."""

    level: ReaderLevel
    label: str
    min_pages: int
    min_books: int
    description: str


READER_LEVELS: list[LevelConfig] = [
    LevelConfig(ReaderLevel.BEGINNER, "Beginner", 0, 0, "Where every journey starts. Just start reading!"),
    LevelConfig(ReaderLevel.READER, "Reader", 100, 1, "Finished a first book or 100 pages."),
    LevelConfig(ReaderLevel.AVID_READER, "Avid Reader", 1000, 5, "Reading is a habit. 1,000 pages or 5 books."),
    LevelConfig(ReaderLevel.DEVOURER, "Devourer", 5000, 20, "You devour stories! 5,000 pages or 20 books."),
    LevelConfig(ReaderLevel.MASTER, "Master", 10000, 50, "The highest level. 10,000 pages or 50 books."),
]


def level_for(total_pages_read: int, total_books_read: int) -> ReaderLevel:
    """Highest level whose page or book minimum is met."""
    current = READER_LEVELS[0].level
    for config in READER_LEVELS:
        if total_pages_read >= config.min_pages or total_books_read >= config.min_books:
            current = config.level
    return current


def get_level_config(level: ReaderLevel) -> LevelConfig:
    for config in READER_LEVELS:
        if config.level == level:
            return config
    raise ValueError(f"Unknown reader level {level}")


def next_level(level: ReaderLevel) -> Optional[LevelConfig]:
    """The level after ``level``, or None at the top."""
    levels = [config.level for config in READER_LEVELS]
    index = levels.index(level)
    if index == len(levels) - 1:
        return None
    return READER_LEVELS[index + 1]


def level_progress(profile: Profile, target: LevelConfig) -> dict[str, float]:
    """Percent progress towards ``target``, each figure capped at 100."""
    pages = min(100.0, profile.total_pages_read / max(1, target.min_pages) * 100)
    books = min(100.0, profile.total_books_read / max(1, target.min_books) * 100)
    return {"pages_progress": pages, "books_progress": books}
