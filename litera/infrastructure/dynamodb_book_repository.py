"""DynamoDB implementations of the book catalog and user libraries."""

from typing import Any, Dict, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from ..domain.entities.book import Book, UserBook
from ..domain.interfaces.book_repository import BookRepository, UserBookRepository
from .dynamodb_base import DynamoDBRepository, from_item, is_condition_failure, to_item

GOOGLE_ID_INDEX = "google_books_id-index"
BOOK_ID_INDEX = "book_id-index"


class DynamoDBBookRepository(DynamoDBRepository, BookRepository):
    """Catalog books keyed by ``id``, with an index on ``google_books_id``."""

    async def get_book(self, book_id: str) -> Book:
        """Retrieve a book by ID from DynamoDB.

        Raises:
            ValueError: If the book is not found.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.get_item(Key={"id": book_id})

            if "Item" not in response:
                raise ValueError(f"Book with id {book_id} not found")

            return self._item_to_book(response["Item"])

    async def find_by_google_id(self, google_books_id: str) -> Optional[Book]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._query_all(
                table,
                IndexName=GOOGLE_ID_INDEX,
                KeyConditionExpression=Key("google_books_id").eq(google_books_id),
            )

        item = self._first(items)
        return self._item_to_book(item) if item else None

    async def save_book(self, book: Book) -> None:
        item = to_item(book)
        if item.get("google_books_id") is None:
            # Index key attributes cannot be NULL
            item.pop("google_books_id", None)

        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.put_item(Item=item)

    def _item_to_book(self, item: Dict[str, Any]) -> Book:
        return Book.model_validate(from_item(item))


class DynamoDBUserBookRepository(DynamoDBRepository, UserBookRepository):
    """Library entries keyed by ``user_id`` (partition) and ``book_id`` (sort)."""

    async def get_user_book(self, user_id: str, book_id: str) -> Optional[UserBook]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.get_item(Key={"user_id": user_id, "book_id": book_id})

        if "Item" not in response:
            return None
        return self._item_to_user_book(response["Item"])

    async def save_user_book(self, user_book: UserBook) -> None:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.put_item(Item=to_item(user_book))

    async def update_current_page(self, user_id: str, book_id: str, current_page: int) -> None:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            try:
                await table.update_item(
                    Key={"user_id": user_id, "book_id": book_id},
                    UpdateExpression="SET current_page = :page",
                    ConditionExpression="attribute_exists(user_id)",
                    ExpressionAttributeValues={":page": current_page},
                )
            except ClientError as e:
                # Reading a book that is not on a shelf is allowed
                if not is_condition_failure(e):
                    raise

    async def list_user_books(self, user_id: str) -> list[UserBook]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._query_all(table, KeyConditionExpression=Key("user_id").eq(user_id))

        entries = [self._item_to_user_book(item) for item in items]
        return sorted(entries, key=lambda entry: entry.updated_at, reverse=True)

    async def list_ratings(self, book_id: str) -> list[int]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            items = await self._query_all(
                table,
                IndexName=BOOK_ID_INDEX,
                KeyConditionExpression=Key("book_id").eq(book_id),
            )

        return [int(item["rating"]) for item in items if item.get("rating") is not None]

    async def delete_user_book(self, user_id: str, book_id: str) -> None:
        """Remove an entry.

        Raises:
            ValueError: If the entry is not found.
        """
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            try:
                await table.delete_item(
                    Key={"user_id": user_id, "book_id": book_id},
                    ConditionExpression="attribute_exists(user_id)",
                )
            except ClientError as e:
                if is_condition_failure(e):
                    raise ValueError(f"Book {book_id} not found in library of {user_id}") from e
                raise

    def _item_to_user_book(self, item: Dict[str, Any]) -> UserBook:
        return UserBook.model_validate(from_item(item))
