"""Local in-memory implementation of PostRepository."""

from typing import Dict, Optional

from ..domain.entities.post import Post, PostType
from ..domain.interfaces.post_repository import PostRepository


class LocalPostRepository(PostRepository):
    """Stores feed posts in a dictionary for testing and development purposes."""

    def __init__(self):
        self._posts: Dict[str, Post] = {}

    async def save_post(self, post: Post) -> None:
        self._posts[post.id] = post

    async def list_posts(self, user_id: str) -> list[Post]:
        posts = [post for post in self._posts.values() if post.user_id == user_id]
        return sorted(posts, key=lambda post: post.created_at, reverse=True)

    async def find_post(self, user_id: str, book_id: str, post_type: PostType) -> Optional[Post]:
        for post in self._posts.values():
            if post.user_id == user_id and post.book_id == book_id and post.type == post_type:
                return post
        return None

    def get_all_posts(self) -> Dict[str, Post]:
        """Get all posts keyed by id."""
        return self._posts.copy()
