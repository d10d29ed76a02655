"""Google Books search client with retries and a result cache."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ..domain.interfaces.book_search_provider import BookSearchProvider
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)


@dataclass
class _CacheEntry:
    timestamp: float
    items: list[Dict[str, Any]]


class GoogleBooksClient(BookSearchProvider):
    """Client for the Google Books volumes API.

    Successful non-empty results are cached per query. Fresh entries are
    served without a request; expired ones are kept as a fallback for when
    the API is rate limited or unreachable. At most ``max_cache_entries``
    queries are kept; when full, expired entries go first, then the oldest.
    """

    def __init__(
        self,
        base_url: str = "https://www.googleapis.com/books/v1",
        api_key: Optional[str] = None,
        cache_ttl: float = 24 * 60 * 60,
        max_cache_entries: int = 256,
        max_retries: int = 2,
        backoff_seconds: float = 2.0,
        timeout: float = 10.0,
        max_results: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.volumes_url = f"{base_url.rstrip('/')}/volumes"
        self.api_key = api_key
        self.cache_ttl = cache_ttl
        self.max_cache_entries = max_cache_entries
        self.timeout = timeout
        self.max_results = max_results
        self._transport = transport
        self._clock = clock
        self._cache: Dict[str, _CacheEntry] = {}
        self._fetch = retry_with_backoff(max_retries=max_retries, backoff_seconds=backoff_seconds)(
            self._fetch_once
        )

    async def search(self, query: str) -> list[Dict[str, Any]]:
        """Search volumes by free text.

        Returns:
            Raw volume records. Stale cached results when the API fails and
            something was cached before, otherwise an empty list.
        """
        if not query.strip():
            return []

        cached = self._cache.get(query)
        if cached and self._clock() - cached.timestamp < self.cache_ttl:
            logger.debug(f"Using cached results for '{query}'")
            return cached.items

        try:
            response = await self._fetch(query)
            if response.status_code in (429, 503) and cached:
                logger.warning(f"Google Books returned {response.status_code}, serving stale cache for '{query}'")
                return cached.items
            response.raise_for_status()

            items = response.json().get("items", [])
        except Exception as e:
            logger.error(f"Google Books search error for '{query}': {e}")
            return cached.items if cached else []

        if items:
            self._remember(query, items)
        logger.info(f"Google Books search '{query}' returned {len(items)} results")
        return items

    def _remember(self, query: str, items: list[Dict[str, Any]]) -> None:
        now = self._clock()
        if query not in self._cache and len(self._cache) >= self.max_cache_entries:
            expired = [key for key, entry in self._cache.items() if now - entry.timestamp >= self.cache_ttl]
            for key in expired:
                del self._cache[key]
            while self._cache and len(self._cache) >= self.max_cache_entries:
                oldest = min(self._cache, key=lambda key: self._cache[key].timestamp)
                logger.debug(f"Evicting cached results for '{oldest}'")
                del self._cache[oldest]
        self._cache[query] = _CacheEntry(timestamp=now, items=items)

    async def _fetch_once(self, query: str) -> httpx.Response:
        params = {"q": query, "maxResults": self.max_results}
        if self.api_key:
            params["key"] = self.api_key

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.get(self.volumes_url, params=params)

    def clear_cache(self) -> None:
        """Drop every cached result."""
        self._cache.clear()
