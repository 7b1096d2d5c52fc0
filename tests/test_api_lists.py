"""Tests for reading list API endpoints."""

import pytest
from httpx import AsyncClient

from booklinks.models.user import User


class TestCreateList:
    """Tests for POST /api/lists."""

    @pytest.mark.asyncio
    async def test_requires_login(self, client: AsyncClient):
        response = await client.post("/api/lists", json={"name": "Summer"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_with_first_book(self, authenticated_client: AsyncClient, make_book):
        dune = await make_book("Dune", author="Frank Herbert")

        response = await authenticated_client.post(
            "/api/lists", json={"name": "Summer Reading", "book_id": dune.id}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"].startswith("summer-reading-")
        assert data["is_public"] is False
        assert data["owner_name"] == "testuser"
        assert data["item_count"] == 1
        assert data["items"][0]["book"]["slug"] == "dune"
        assert data["items"][0]["position"] == 0

    @pytest.mark.asyncio
    async def test_unknown_first_book(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/api/lists", json={"name": "Summer", "book_id": 999}
        )
        assert response.status_code == 404


class TestListItems:
    """Tests for adding and removing books."""

    @pytest.mark.asyncio
    async def test_items_are_appended_in_order(self, authenticated_client: AsyncClient, make_book):
        dune = await make_book("Dune")
        emma = await make_book("Emma")
        list_id = (await authenticated_client.post("/api/lists", json={"name": "L"})).json()["id"]

        first = await authenticated_client.post(
            f"/api/lists/{list_id}/items", json={"book_id": dune.id}
        )
        second = await authenticated_client.post(
            f"/api/lists/{list_id}/items", json={"book_id": emma.id, "notes": "Later"}
        )

        assert first.status_code == 201
        assert second.status_code == 201
        items = second.json()["items"]
        assert [(i["book"]["slug"], i["position"]) for i in items] == [("dune", 0), ("emma", 1)]
        assert items[1]["notes"] == "Later"

    @pytest.mark.asyncio
    async def test_adding_twice_changes_nothing(self, authenticated_client: AsyncClient, make_book):
        dune = await make_book("Dune")
        list_id = (await authenticated_client.post("/api/lists", json={"name": "L"})).json()["id"]

        await authenticated_client.post(f"/api/lists/{list_id}/items", json={"book_id": dune.id})
        response = await authenticated_client.post(
            f"/api/lists/{list_id}/items", json={"book_id": dune.id}
        )

        assert response.status_code == 200
        assert response.json()["item_count"] == 1

    @pytest.mark.asyncio
    async def test_remove_item(self, authenticated_client: AsyncClient, make_book):
        dune = await make_book("Dune")
        created = await authenticated_client.post(
            "/api/lists", json={"name": "L", "book_id": dune.id}
        )
        list_id = created.json()["id"]

        response = await authenticated_client.delete(f"/api/lists/{list_id}/items/{dune.id}")
        assert response.status_code == 204

        response = await authenticated_client.delete(f"/api/lists/{list_id}/items/{dune.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_mine_flags_lists_holding_book(
        self, authenticated_client: AsyncClient, make_book
    ):
        dune = await make_book("Dune")
        with_book = await authenticated_client.post(
            "/api/lists", json={"name": "Has Dune", "book_id": dune.id}
        )
        await authenticated_client.post("/api/lists", json={"name": "Empty"})

        response = await authenticated_client.get("/api/lists/mine", params={"book_id": dune.id})

        flags = {rl["name"]: rl["contains_book"] for rl in response.json()}
        assert flags == {"Has Dune": True, "Empty": False}
        assert with_book.json()["id"] in [rl["id"] for rl in response.json()]


class TestVisibilityAndOwnership:
    """Private lists and owner-only changes."""

    @pytest.mark.asyncio
    async def test_private_list_hidden_from_others(
        self, authenticated_client: AsyncClient, other_user: User, login_as
    ):
        slug = (await authenticated_client.post("/api/lists", json={"name": "Secret"})).json()["slug"]

        assert (await authenticated_client.get(f"/api/lists/{slug}")).status_code == 200

        login_as(other_user)
        assert (await authenticated_client.get(f"/api/lists/{slug}")).status_code == 404

        login_as(None)
        assert (await authenticated_client.get(f"/api/lists/{slug}")).status_code == 404

    @pytest.mark.asyncio
    async def test_public_lists(self, authenticated_client: AsyncClient, login_as):
        await authenticated_client.post("/api/lists", json={"name": "Open", "is_public": True})
        await authenticated_client.post("/api/lists", json={"name": "Closed"})

        login_as(None)
        response = await authenticated_client.get("/api/lists")

        assert [rl["name"] for rl in response.json()] == ["Open"]

    @pytest.mark.asyncio
    async def test_update_and_delete_owner_only(
        self, authenticated_client: AsyncClient, other_user: User, login_as
    ):
        list_id = (await authenticated_client.post("/api/lists", json={"name": "Mine"})).json()["id"]

        login_as(other_user)
        response = await authenticated_client.patch(f"/api/lists/{list_id}", json={"name": "Theirs"})
        assert response.status_code == 403
        assert (await authenticated_client.delete(f"/api/lists/{list_id}")).status_code == 403

    @pytest.mark.asyncio
    async def test_update_list(self, authenticated_client: AsyncClient):
        list_id = (await authenticated_client.post("/api/lists", json={"name": "Mine"})).json()["id"]

        response = await authenticated_client.patch(
            f"/api/lists/{list_id}", json={"name": "Renamed", "is_public": True}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["is_public"] is True

    @pytest.mark.asyncio
    async def test_delete_list(self, authenticated_client: AsyncClient):
        created = (await authenticated_client.post("/api/lists", json={"name": "Gone"})).json()

        response = await authenticated_client.delete(f"/api/lists/{created['id']}")
        assert response.status_code == 204
        assert (await authenticated_client.get(f"/api/lists/{created['slug']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_list(self, authenticated_client: AsyncClient):
        response = await authenticated_client.patch("/api/lists/999", json={"name": "X"})
        assert response.status_code == 404
