"""Rate limiting: outbound API token buckets and the auth attempt throttle."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from booklinks.constants import AUTH_RATE_LIMIT, AUTH_RATE_WINDOW_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    requests_per_second: float = 2.0  # Max requests per second
    burst_size: int = 5  # Allow short bursts


@dataclass
class TokenBucket:
    """Token bucket for rate limiting."""

    capacity: int
    refill_rate: float  # tokens per second
    tokens: float = field(default=0.0)
    last_refill: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        self.tokens = float(self.capacity)

    def _refill(self) -> None:
        """Refill tokens based on elapsed time."""
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    def acquire(self, tokens: int = 1) -> float:
        """Try to acquire tokens.

        Returns:
            Wait time in seconds (0 if tokens acquired immediately)
        """
        self._refill()

        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0

        return (tokens - self.tokens) / self.refill_rate

    async def acquire_async(self, tokens: int = 1) -> None:
        """Acquire tokens, waiting if necessary."""
        wait_time = self.acquire(tokens)
        if wait_time > 0:
            logger.debug(f"Rate limited, waiting {wait_time:.2f}s")
            await asyncio.sleep(wait_time)
            self._refill()
            self.tokens -= tokens


class RateLimiter:
    """Per-service token buckets for outbound API calls."""

    def __init__(self) -> None:
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = asyncio.Lock()
        self._configs = {
            "googlebooks": RateLimitConfig(requests_per_second=4.0, burst_size=10),
            "openai": RateLimitConfig(requests_per_second=1.0, burst_size=3),
            "default": RateLimitConfig(),
        }

    def _get_bucket(self, service: str) -> TokenBucket:
        if service not in self._buckets:
            config = self._configs.get(service, self._configs["default"])
            self._buckets[service] = TokenBucket(
                capacity=config.burst_size,
                refill_rate=config.requests_per_second,
            )
        return self._buckets[service]

    async def acquire(self, service: str = "default", tokens: int = 1) -> None:
        """Block until the service's bucket grants ``tokens``."""
        async with self._lock:
            await self._get_bucket(service).acquire_async(tokens)


rate_limiter = RateLimiter()


@dataclass
class _Window:
    count: int
    reset_at: float


class AuthAttemptLimiter:
    """Process-local throttle on authentication attempts per caller address.

    The first attempt from an address opens a window of ``window_seconds``;
    attempts beyond ``limit`` inside that window are refused. State is not
    shared between processes and is lost on restart, so this is a soft
    throttle only.
    """

    def __init__(
        self,
        limit: int = AUTH_RATE_LIMIT,
        window_seconds: float = AUTH_RATE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def is_limited(self, address: str) -> bool:
        """Record an attempt from ``address`` and report whether it is over the limit."""
        now = self._clock()
        window = self._windows.get(address)

        if window is None or now > window.reset_at:
            self._windows[address] = _Window(count=1, reset_at=now + self.window_seconds)
            self._prune(now)
            return False

        window.count += 1
        return window.count > self.limit

    def _prune(self, now: float) -> None:
        expired = [addr for addr, w in self._windows.items() if now > w.reset_at]
        for addr in expired:
            del self._windows[addr]

    def reset(self) -> None:
        """Forget all recorded attempts."""
        self._windows.clear()


auth_limiter = AuthAttemptLimiter()


def client_address(forwarded_for: str | None, client_host: str | None) -> str:
    """Caller address: first X-Forwarded-For entry, else the socket peer."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return client_host or "unknown"
