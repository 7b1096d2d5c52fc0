"""Tests for graph assembly."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.db.crud import insert_reference
from booklinks.services.graph import build_reference_graph, load_reference_graph


def _book(book_id: int, title: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=book_id, slug=title.lower(), title=title, author="Author", cover_url=None
    )


A, B, C = _book(1, "A"), _book(2, "B"), _book(3, "C")


def _connections(graph: dict) -> dict[int, int]:
    return {node["id"]: node["connections"] for node in graph["nodes"]}


class TestBuildReferenceGraph:
    """Tests for the pure node/link builder."""

    def test_empty(self):
        assert build_reference_graph([]) == {"nodes": [], "links": []}

    def test_mutual_references_count_twice(self):
        graph = build_reference_graph([(A, B), (B, A)])

        assert _connections(graph) == {1: 2, 2: 2}
        assert graph["links"] == [{"source": 1, "target": 2}, {"source": 2, "target": 1}]

    def test_fan_out(self):
        graph = build_reference_graph([(A, B), (A, C)])

        assert _connections(graph) == {1: 2, 2: 1, 3: 1}
        assert len(graph["links"]) == 2

    def test_nodes_appear_once_in_first_seen_order(self):
        graph = build_reference_graph([(B, A), (C, A), (A, B)])

        assert [node["id"] for node in graph["nodes"]] == [2, 1, 3]
        assert graph["nodes"][1]["slug"] == "a"

    def test_edges_with_missing_endpoint_are_skipped(self):
        graph = build_reference_graph([(A, None), (None, B), (A, C)])

        assert _connections(graph) == {1: 1, 3: 1}
        assert graph["links"] == [{"source": 1, "target": 3}]


class TestLoadReferenceGraph:
    """Tests for reading the graph from the database."""

    @pytest.mark.asyncio
    async def test_edge_limit(self, db_session: AsyncSession, make_book):
        first = await make_book("First")
        second = await make_book("Second")
        third = await make_book("Third")
        await insert_reference(db_session, first.id, second.id)
        await insert_reference(db_session, first.id, third.id)
        await db_session.commit()

        graph = await load_reference_graph(db_session, limit=1)

        assert graph["links"] == [{"source": first.id, "target": second.id}]
        assert len(graph["nodes"]) == 2

    @pytest.mark.asyncio
    async def test_read_error_gives_empty_graph(self, db_session: AsyncSession):
        with patch(
            "booklinks.services.graph.get_graph_edges",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("gone"))),
        ):
            graph = await load_reference_graph(db_session)

        assert graph == {"nodes": [], "links": []}


class TestGraphEndpoint:
    """Tests for GET /api/graph."""

    @pytest.mark.asyncio
    async def test_graph_payload(self, client: AsyncClient, db_session: AsyncSession, make_book):
        ulysses = await make_book("Ulysses", author="James Joyce")
        odyssey = await make_book("The Odyssey", author="Homer")
        await insert_reference(db_session, ulysses.id, odyssey.id)
        await insert_reference(db_session, odyssey.id, ulysses.id)
        await db_session.commit()

        response = await client.get("/api/graph")

        assert response.status_code == 200
        data = response.json()
        assert {n["slug"]: n["connections"] for n in data["nodes"]} == {
            "ulysses": 2,
            "the-odyssey": 2,
        }
        assert len(data["links"]) == 2

    @pytest.mark.asyncio
    async def test_read_error_returns_empty_payload(self, client: AsyncClient):
        with patch(
            "booklinks.services.graph.get_graph_edges",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("gone"))),
        ):
            response = await client.get("/api/graph")

        assert response.status_code == 200
        assert response.json() == {"nodes": [], "links": []}
