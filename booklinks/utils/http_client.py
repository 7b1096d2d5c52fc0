"""Shared persistent httpx clients for external API calls.

Reusing clients keeps TCP/TLS connections pooled across requests.
"""

import httpx

from booklinks.constants import API_TIMEOUT_EXTERNAL

_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_google_books_client: httpx.AsyncClient | None = None


def get_google_books_client() -> httpx.AsyncClient:
    """Get persistent httpx client for Google Books API calls."""
    global _google_books_client
    if _google_books_client is None:
        _google_books_client = httpx.AsyncClient(
            timeout=API_TIMEOUT_EXTERNAL,
            limits=_POOL_LIMITS,
            http2=False,
        )
    return _google_books_client


async def close_all_clients() -> None:
    """Close all persistent httpx clients. Call during app shutdown."""
    global _google_books_client
    if _google_books_client is not None:
        await _google_books_client.aclose()
        _google_books_client = None
