"""Post repository protocol."""

from typing import Optional, Protocol, runtime_checkable

from ..entities.post import Post, PostType


@runtime_checkable
class PostRepository(Protocol):
    """Protocol for feed post stores."""

    async def save_post(self, post: Post) -> None:
        """Create or replace a post keyed by its id."""
        ...

    async def list_posts(self, user_id: str) -> list[Post]:
        """List a user's posts, newest first."""
        ...

    async def find_post(self, user_id: str, book_id: str, post_type: PostType) -> Optional[Post]:
        """Return the user's first post of a type about a book, if any."""
        ...
