"""DynamoDB implementation of PostRepository."""

from typing import Optional

from boto3.dynamodb.conditions import Attr, Key

from ..domain.entities.post import Post, PostType
from ..domain.interfaces.post_repository import PostRepository
from .dynamodb_base import DynamoDBRepository, from_item, to_item

USER_CREATED_AT_INDEX = "user_id-created_at-index"


class DynamoDBPostRepository(DynamoDBRepository, PostRepository):
    """Feed posts keyed by ``id``, listed through a ``user_id``/``created_at`` index."""

    async def save_post(self, post: Post) -> None:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.put_item(Item=to_item(post))

    async def list_posts(self, user_id: str) -> list[Post]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._query_all(
                table,
                IndexName=USER_CREATED_AT_INDEX,
                KeyConditionExpression=Key("user_id").eq(user_id),
                ScanIndexForward=False,
            )

        return [Post.model_validate(from_item(item)) for item in items]

    async def find_post(self, user_id: str, book_id: str, post_type: PostType) -> Optional[Post]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._query_all(
                table,
                IndexName=USER_CREATED_AT_INDEX,
                KeyConditionExpression=Key("user_id").eq(user_id),
                FilterExpression=Attr("book_id").eq(book_id) & Attr("type").eq(post_type.value),
            )

        item = self._first(items)
        return Post.model_validate(from_item(item)) if item else None
