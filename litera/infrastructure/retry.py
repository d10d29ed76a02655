"""Retry with exponential backoff for outbound HTTP calls."""

import asyncio
import logging
from functools import wraps

import httpx

logger = logging.getLogger(__name__)


def retry_with_backoff(max_retries: int = 2, backoff_seconds: float = 2.0, retry_statuses=(429,)):
    """
    A decorator to retry an async call returning an ``httpx.Response``.

    Retries on transport errors and on the given status codes, sleeping
    ``backoff_seconds * 2 ** (attempt - 1)`` between attempts. When retries
    run out, the last response is returned or the last error re-raised.

    Args:
        max_retries: Retries after the first attempt
        backoff_seconds: Initial backoff duration in seconds
        retry_statuses: Status codes worth retrying
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    response = await func(*args, **kwargs)
                except httpx.TransportError as e:
                    if attempt >= max_retries:
                        logger.error(f"{func.__name__} failed after {attempt + 1} attempts: {e}")
                        raise
                    reason = f"{type(e).__name__}"
                else:
                    if response.status_code not in retry_statuses or attempt >= max_retries:
                        return response
                    reason = f"HTTP {response.status_code}"

                attempt += 1
                sleep_duration = backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    f"{reason} in {func.__name__}, retry {attempt}/{max_retries} "
                    f"in {sleep_duration} seconds..."
                )
                await asyncio.sleep(sleep_duration)
        return wrapper
    return decorator
