"""Tests for statistics API endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.api.stats import compute_stats
from booklinks.db.crud import insert_reference


class TestStatsEndpoint:
    """Tests for /api/stats endpoint."""

    @pytest.mark.asyncio
    async def test_stats_is_public(self, client: AsyncClient):
        response = await client.get("/api/stats")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_empty_stats(self, client: AsyncClient):
        data = (await client.get("/api/stats")).json()

        assert data["total_books"] == 0
        assert data["total_references"] == 0
        assert data["daily_counts"] == []
        assert data["most_referenced"] == []
        assert data["most_connected"] == []


class TestComputeStats:
    """Tests for the statistics queries."""

    @pytest.mark.asyncio
    async def test_rankings(self, db_session: AsyncSession, make_book):
        odyssey = await make_book("The Odyssey", author="Homer")
        ulysses = await make_book("Ulysses", author="James Joyce")
        omeros = await make_book("Omeros", author="Derek Walcott")
        await make_book("Isolated")
        await insert_reference(db_session, ulysses.id, odyssey.id)
        await insert_reference(db_session, omeros.id, odyssey.id)
        await insert_reference(db_session, odyssey.id, omeros.id)
        await db_session.commit()

        stats = await compute_stats(db_session)

        assert stats.total_books == 4
        assert stats.total_references == 3
        assert sum(day.count for day in stats.daily_counts) == 4

        assert [(b.slug, b.reference_count) for b in stats.most_referenced] == [
            ("the-odyssey", 2),
            ("omeros", 1),
        ]

        connected = {b.slug: (b.outgoing, b.incoming, b.total) for b in stats.most_connected}
        assert connected == {
            "the-odyssey": (1, 2, 3),
            "omeros": (1, 1, 2),
            "ulysses": (1, 0, 1),
        }
        assert stats.most_connected[0].slug == "the-odyssey"
