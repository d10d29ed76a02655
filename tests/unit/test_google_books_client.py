"""Tests for the Google Books client and its retry decorator."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from litera.infrastructure.google_books_client import GoogleBooksClient
from litera.infrastructure.retry import retry_with_backoff

VOLUMES = [{"id": "vol-1", "volumeInfo": {"title": "Dom Casmurro"}}]


class Recorder:
    """MockTransport handler replaying canned replies and recording requests.

    A reply is a status code, a list of volumes (served as 200) or an
    exception to raise. The last reply repeats once the others are used.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, list):
            return httpx.Response(200, json={"items": reply})
        return httpx.Response(reply)


class FakeTime:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def fetch_mock(**kwargs) -> AsyncMock:
    calls = AsyncMock(**kwargs)
    calls.__name__ = "fetch_volumes"
    return calls


def make_client(handler, clock=None, **kwargs) -> GoogleBooksClient:
    return GoogleBooksClient(
        api_key="secret",
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
        clock=clock or FakeTime(),
        **kwargs,
    )


class TestGoogleBooksClient:
    """Test cases for GoogleBooksClient.search."""

    @pytest.mark.asyncio
    async def test_search_returns_items(self):
        handler = Recorder(VOLUMES)
        client = make_client(handler)

        items = await client.search("machado")

        assert items == VOLUMES
        request = handler.requests[0]
        assert request.url.path == "/books/v1/volumes"
        assert request.url.params["q"] == "machado"
        assert request.url.params["maxResults"] == "10"
        assert request.url.params["key"] == "secret"

    @pytest.mark.asyncio
    async def test_blank_query_skips_request(self):
        handler = Recorder(VOLUMES)
        client = make_client(handler)

        assert await client.search("   ") == []
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_fresh_cache_is_served(self):
        handler = Recorder(VOLUMES)
        client = make_client(handler)

        await client.search("machado")
        items = await client.search("machado")

        assert items == VOLUMES
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_expired_cache_is_refreshed(self):
        clock = FakeTime()
        handler = Recorder(VOLUMES, [{"id": "vol-2"}])
        client = make_client(handler, clock=clock, cache_ttl=60)

        await client.search("machado")
        clock.now += 61
        items = await client.search("machado")

        assert items == [{"id": "vol-2"}]
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self):
        handler = Recorder(429, VOLUMES)
        client = make_client(handler)

        items = await client.search("machado")

        assert items == VOLUMES
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_serves_stale_cache(self):
        clock = FakeTime()
        handler = Recorder(VOLUMES, 429)
        client = make_client(handler, clock=clock, cache_ttl=60)

        await client.search("machado")
        clock.now += 3600
        items = await client.search("machado")

        assert items == VOLUMES
        # One fetch plus the first attempt and two retries
        assert len(handler.requests) == 4

    @pytest.mark.asyncio
    async def test_rate_limit_without_cache_returns_empty(self):
        handler = Recorder(429)
        client = make_client(handler)

        assert await client.search("machado") == []

    @pytest.mark.asyncio
    async def test_network_error_serves_stale_cache(self):
        clock = FakeTime()
        handler = Recorder(VOLUMES, httpx.ConnectError("offline"))
        client = make_client(handler, clock=clock, cache_ttl=60)

        await client.search("machado")
        clock.now += 3600

        assert await client.search("machado") == VOLUMES

    @pytest.mark.asyncio
    async def test_network_error_without_cache_returns_empty(self):
        client = make_client(Recorder(httpx.ConnectError("offline")))

        assert await client.search("machado") == []

    @pytest.mark.asyncio
    async def test_server_error_returns_empty(self):
        client = make_client(Recorder(500))

        assert await client.search("machado") == []

    @pytest.mark.asyncio
    async def test_empty_results_are_not_cached(self):
        handler = Recorder([], VOLUMES)
        client = make_client(handler)

        assert await client.search("machado") == []
        assert await client.search("machado") == VOLUMES
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_cache_evicts_oldest_when_full(self):
        clock = FakeTime()
        handler = Recorder(VOLUMES)
        client = make_client(handler, clock=clock, max_cache_entries=2)

        for query in ("a", "b", "c"):
            await client.search(query)
            clock.now += 1

        assert list(client._cache) == ["b", "c"]
        await client.search("a")
        assert len(handler.requests) == 4

    @pytest.mark.asyncio
    async def test_cache_drops_expired_entries_first(self):
        clock = FakeTime()
        handler = Recorder(VOLUMES)
        client = make_client(handler, clock=clock, cache_ttl=60, max_cache_entries=2)

        await client.search("old")
        clock.now += 50
        await client.search("recent")
        clock.now += 20
        await client.search("new")

        assert sorted(client._cache) == ["new", "recent"]

    @pytest.mark.asyncio
    async def test_refreshing_a_cached_query_evicts_nothing(self):
        clock = FakeTime()
        handler = Recorder(VOLUMES)
        client = make_client(handler, clock=clock, cache_ttl=60, max_cache_entries=2)

        await client.search("a")
        await client.search("b")
        clock.now += 61
        await client.search("a")

        assert sorted(client._cache) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_clear_cache(self):
        handler = Recorder(VOLUMES)
        client = make_client(handler)

        await client.search("machado")
        client.clear_cache()
        await client.search("machado")

        assert len(handler.requests) == 2


class TestRetryWithBackoff:
    """Test cases for the retry_with_backoff decorator."""

    @pytest.mark.asyncio
    async def test_backoff_doubles(self):
        calls = fetch_mock(
            side_effect=[httpx.Response(429), httpx.Response(429), httpx.Response(200)]
        )
        fetch = retry_with_backoff(max_retries=2, backoff_seconds=2.0)(calls)

        with patch("litera.infrastructure.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            response = await fetch()

        assert response.status_code == 200
        assert [call.args[0] for call in sleep.await_args_list] == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_returns_last_response_when_exhausted(self):
        calls = fetch_mock(return_value=httpx.Response(429))
        fetch = retry_with_backoff(max_retries=1, backoff_seconds=0)(calls)

        response = await fetch()

        assert response.status_code == 429
        assert calls.await_count == 2

    @pytest.mark.asyncio
    async def test_reraises_transport_error_when_exhausted(self):
        calls = fetch_mock(side_effect=httpx.ConnectError("offline"))
        fetch = retry_with_backoff(max_retries=2, backoff_seconds=0)(calls)

        with pytest.raises(httpx.ConnectError):
            await fetch()
        assert calls.await_count == 3

    @pytest.mark.asyncio
    async def test_other_statuses_are_not_retried(self):
        calls = fetch_mock(return_value=httpx.Response(404))
        fetch = retry_with_backoff(max_retries=2, backoff_seconds=0)(calls)

        assert (await fetch()).status_code == 404
        assert calls.await_count == 1
