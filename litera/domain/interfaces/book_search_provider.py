"""Book search provider protocol."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BookSearchProvider(Protocol):
    """Protocol for external book search services."""

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Search for volumes matching a free-text query.

        Args:
            query: Search terms.

        Returns:
            list[dict]: Raw volume records. Empty when nothing matched or
            the service could not be reached.
        """
        ...
