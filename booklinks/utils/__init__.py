"""Utility modules for BookLinks."""

from booklinks.utils.logging import LogContext, get_logger, setup_logging
from booklinks.utils.rate_limiter import auth_limiter, rate_limiter, RateLimitConfig
from booklinks.utils.retry import retry_async, RetryConfig
from booklinks.utils.slugs import reading_list_slug, slugify

__all__ = [
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Rate limiting
    "auth_limiter",
    "rate_limiter",
    "RateLimitConfig",
    # Retry
    "retry_async",
    "RetryConfig",
    # Slugs
    "reading_list_slug",
    "slugify",
]
