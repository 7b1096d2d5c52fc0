"""Retry with exponential backoff for outbound HTTP calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 2
    base_delay: float = 0.5  # seconds
    max_delay: float = 8.0  # seconds
    exponential_base: float = 2.0
    retryable_exceptions: tuple = (
        httpx.TimeoutException,
        httpx.ConnectError,
        httpx.ReadError,
        httpx.RemoteProtocolError,
    )
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)

    def delay_for(self, attempt: int) -> float:
        """Backoff delay before retry number ``attempt`` (0-based)."""
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    request: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    operation_name: str = "request",
) -> httpx.Response:
    """Run ``request`` until it returns a non-retryable response.

    Transient transport errors and retryable status codes are retried with
    exponential backoff. When retries are exhausted the last response is
    returned, or the last transport error is raised.
    """
    attempts = config.max_retries + 1
    for attempt in range(attempts):
        last = attempt == attempts - 1
        try:
            response = await request()
        except config.retryable_exceptions as e:
            if last:
                logger.error(f"{operation_name}: failed after {attempts} attempts: {e}")
                raise
            delay = config.delay_for(attempt)
            logger.warning(
                f"{operation_name}: {type(e).__name__}, retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{attempts})"
            )
            await asyncio.sleep(delay)
            continue

        if response.status_code in config.retryable_status_codes and not last:
            delay = config.delay_for(attempt)
            logger.warning(
                f"{operation_name}: got status {response.status_code}, retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{attempts})"
            )
            await asyncio.sleep(delay)
            continue
        return response

    raise RuntimeError("unreachable")  # pragma: no cover
