"""Google Books API client.

Used for three things:
1. Free-text search when a user looks for a book to add
2. Text-search "mentions" of a book, which corroborate references
3. Cover/description lookup when a discovered book is first stored
"""

import re
from typing import Any

import httpx

from booklinks.config import get_settings
from booklinks.constants import (
    CACHE_TTL_SEARCH,
    DISCOVERY_MENTION_RESULTS,
    GOOGLE_BOOKS_API_URL,
    GOOGLE_SEARCH_RESULTS,
    UNKNOWN_AUTHOR,
)
from booklinks.utils.cache import cache, make_cache_key
from booklinks.utils.http_client import get_google_books_client
from booklinks.utils.logging import get_logger
from booklinks.utils.rate_limiter import rate_limiter
from booklinks.utils.retry import retry_async

logger = get_logger(__name__)
settings = get_settings()

# Partial responses keep payloads small; mention search needs the text snippet
MENTION_FIELDS = (
    "items(id,volumeInfo(title,authors,description,imageLinks/thumbnail),searchInfo/textSnippet)"
)
METADATA_FIELDS = "volumeInfo(description,imageLinks/thumbnail)"

_TAG_RE = re.compile(r"<[^>]+>")


def normalize_cover_url(url: str | None) -> str | None:
    """Force https on Google thumbnail links."""
    if not url:
        return None
    return url.replace("http://", "https://", 1)


def clean_snippet(snippet: str | None) -> str:
    """Strip the HTML highlighting Google puts in text snippets."""
    if not snippet:
        return ""
    return _TAG_RE.sub("", snippet).replace("&#39;", "'").replace("&quot;", '"').strip()


def parse_volume(item: dict[str, Any]) -> dict[str, Any] | None:
    """Flatten a Google Books volume into the fields BookLinks stores."""
    info = item.get("volumeInfo") or {}
    title = (info.get("title") or "").strip()
    if not title:
        return None

    authors = info.get("authors") or []
    images = info.get("imageLinks") or {}
    search_info = item.get("searchInfo") or {}

    return {
        "google_id": item.get("id"),
        "title": title,
        "authors": authors,
        "author": authors[0] if authors else UNKNOWN_AUTHOR,
        "description": info.get("description"),
        "cover_url": normalize_cover_url(images.get("thumbnail")),
        "snippet": clean_snippet(search_info.get("textSnippet")),
    }


class GoogleBooksService:
    """Service for fetching book metadata from the Google Books API."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self.api = GOOGLE_BOOKS_API_URL
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_google_books_client()

    def _params(self, **params: Any) -> dict[str, Any]:
        if settings.google_books_api_key:
            params["key"] = settings.google_books_api_key
        return params

    async def _get(self, path: str, **params: Any) -> dict[str, Any]:
        """GET a Google Books endpoint and return the decoded JSON body.

        Raises httpx errors on transport failure or a non-2xx final status.
        """
        await rate_limiter.acquire("googlebooks")
        response = await retry_async(
            lambda: self.client.get(f"{self.api}{path}", params=self._params(**params)),
            operation_name=f"Google Books {path}",
        )
        response.raise_for_status()
        return response.json()

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search_books(
        self, query: str, limit: int = GOOGLE_SEARCH_RESULTS
    ) -> list[dict[str, Any]]:
        """Free-text search. No results (or an API failure) gives an empty list."""
        query = query.strip()
        if not query:
            return []

        cache_key = make_cache_key("googlebooks:search", query, limit)
        cached = await cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._get("/volumes", q=query, maxResults=min(limit, 40))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Google Books search failed for {query!r}: {e}")
            return []

        results = [v for v in (parse_volume(item) for item in data.get("items", [])) if v]
        await cache.set(cache_key, results, CACHE_TTL_SEARCH)
        return results

    async def search_mentions(self, title: str, author: str | None = None) -> list[dict[str, Any]]:
        """Find volumes whose text mentions ``title`` (and ``author``).

        Raises httpx errors so the caller can decide how to degrade.
        """
        query = f'"{title}"'
        if author:
            query += f' "{author}"'

        data = await self._get(
            "/volumes",
            q=query,
            maxResults=DISCOVERY_MENTION_RESULTS,
            fields=MENTION_FIELDS,
        )
        return [v for v in (parse_volume(item) for item in data.get("items", [])) if v]

    # -------------------------------------------------------------------------
    # Metadata lookup
    # -------------------------------------------------------------------------

    async def get_volume(self, google_id: str) -> dict[str, Any] | None:
        """Fetch cover and description for a known volume id."""
        try:
            data = await self._get(f"/volumes/{google_id}", fields=METADATA_FIELDS)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Google Books volume lookup failed for {google_id}: {e}")
            return None

        info = data.get("volumeInfo") or {}
        return {
            "cover_url": normalize_cover_url((info.get("imageLinks") or {}).get("thumbnail")),
            "description": info.get("description"),
        }

    async def find_metadata(
        self, title: str, author: str, google_id: str | None = None
    ) -> tuple[str | None, str | None]:
        """Best-effort (cover_url, description) for a book about to be stored.

        Tries the known volume id first, then a ``title author`` search for
        whatever is still missing.
        """
        cover_url: str | None = None
        description: str | None = None

        if google_id:
            volume = await self.get_volume(google_id)
            if volume:
                cover_url = volume["cover_url"]
                description = volume["description"]

        if not cover_url:
            try:
                data = await self._get(
                    "/volumes",
                    q=f"{title} {author}".strip(),
                    maxResults=1,
                    fields="items(volumeInfo(imageLinks/thumbnail,description))",
                )
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Google Books cover search failed for {title!r}: {e}")
                data = {}

            items = data.get("items") or []
            if items:
                info = items[0].get("volumeInfo") or {}
                cover_url = normalize_cover_url((info.get("imageLinks") or {}).get("thumbnail"))
                if not description:
                    description = info.get("description")

        return cover_url, description

    async def find_cover(self, title: str, author: str) -> str | None:
        """Cover for an existing book: prefer a result whose title matches."""
        results = await self.search_books(f"{title} {author}".strip(), limit=5)
        if not results:
            return None

        wanted = re.sub(r"[^a-z0-9]", "", title.lower())[:15]
        for result in results:
            result_title = re.sub(r"[^a-z0-9]", "", result["title"].lower())
            if result["cover_url"] and wanted in result_title:
                return result["cover_url"]

        for result in results:
            if result["cover_url"]:
                return result["cover_url"]
        return None


# Singleton instance
google_books_service = GoogleBooksService()
