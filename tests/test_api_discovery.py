"""Tests for the discovery trigger endpoint."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from booklinks.services.metadata.google_books import google_books_service

MENTIONS = [
    {
        "google_id": "vol1",
        "title": "Reading Joyce",
        "authors": ["A Critic"],
        "author": "A Critic",
        "description": None,
        "cover_url": None,
        "snippet": "the chapter on Ulysses",
    }
]


@pytest.fixture
def google_stub():
    """Google Books answers with one mention and no extra metadata."""
    with patch.object(
        google_books_service, "search_mentions", AsyncMock(return_value=MENTIONS)
    ), patch.object(google_books_service, "find_metadata", AsyncMock(return_value=(None, None))):
        yield


class TestDiscoverEndpoint:
    """Tests for POST /api/discover."""

    @pytest.mark.asyncio
    async def test_requires_book_id_or_title(self, client: AsyncClient):
        response = await client.post("/api/discover", json={})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "bookId or bookTitle is required"}

    @pytest.mark.asyncio
    async def test_blank_title_is_missing(self, client: AsyncClient):
        response = await client.post("/api/discover", json={"bookTitle": "  "})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_book(self, client: AsyncClient, google_stub):
        response = await client.post("/api/discover", json={"bookId": 12345})
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Source book not found"}

    @pytest.mark.asyncio
    async def test_discovers_by_title(self, client: AsyncClient, make_book, google_stub):
        ulysses = await make_book("Ulysses", author="James Joyce")

        response = await client.post("/api/discover", json={"bookTitle": "Ulysses"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 1
        assert data["message"] is None
        ref = data["references"][0]
        assert ref["referenced_book_id"] == ulysses.id
        assert ref["source"] == "google_books"
        assert ref["source_verified"] is True

        detail = (await client.get("/api/books/ulysses")).json()
        assert detail["references_discovered"] is True
        assert [r["slug"] for r in detail["referenced_by"]] == ["reading-joyce"]

    @pytest.mark.asyncio
    async def test_second_run_reports_nothing_new(
        self, client: AsyncClient, make_book, google_stub
    ):
        book = await make_book("Ulysses", author="James Joyce")

        await client.post("/api/discover", json={"bookId": book.id})
        response = await client.post("/api/discover", json={"bookId": book.id})

        data = response.json()
        assert data["success"] is True
        assert data["count"] == 0
        assert data["message"] == "No new references found"
