"""Tests for authentication API endpoints."""

from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.api import auth as auth_api
from booklinks.api.auth import upsert_github_user
from booklinks.auth.models import GitHubUser
from booklinks.models.user import User


class TestAuthEndpoints:
    """Tests for /api/auth endpoints."""

    @pytest.mark.asyncio
    async def test_github_login_redirect(self, client: AsyncClient):
        """Test GitHub login initiates OAuth flow with a state parameter."""
        response = await client.get("/api/auth/github/login", follow_redirects=False)
        assert response.status_code == 302

        location = urlparse(response.headers["location"])
        assert location.netloc == "github.com"
        query = parse_qs(location.query)
        assert query["client_id"] == ["test-client-id"]
        assert query["state"][0]

    @pytest.mark.asyncio
    async def test_logout_unauthenticated(self, client: AsyncClient):
        """Test logout when not authenticated."""
        response = await client.get("/api/auth/logout", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_me_unauthenticated(self, client: AsyncClient):
        """Test getting current user when not authenticated."""
        response = await client.get("/api/auth/me", follow_redirects=False)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_authenticated(self, authenticated_client: AsyncClient):
        """Test getting current user when authenticated."""
        response = await authenticated_client.get("/api/auth/me")
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "testuser"
        assert data["is_admin"] is False

    @pytest.mark.asyncio
    async def test_github_callback_without_code(self, client: AsyncClient):
        """Test GitHub callback without authorization code."""
        response = await client.get("/api/auth/github/callback")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_github_callback_state_mismatch_restarts_login(self, client: AsyncClient):
        """A callback whose state was never issued goes back to the login step."""
        response = await client.get(
            "/api/auth/github/callback?code=abc&state=forged", follow_redirects=False
        )
        assert response.status_code == 302
        assert response.headers["location"] == "/api/auth/github/login"


class TestAuthRateLimit:
    """Tests for the auth attempt throttle."""

    @pytest.mark.asyncio
    async def test_eleventh_attempt_is_refused(self, client: AsyncClient):
        for _ in range(10):
            response = await client.get("/api/auth/logout", follow_redirects=False)
            assert response.status_code == 302

        response = await client.get("/api/auth/logout", follow_redirects=False)
        assert response.status_code == 429
        assert response.json() == {"error": "Too many requests. Please try again later."}

    @pytest.mark.asyncio
    async def test_addresses_are_counted_separately(self, client: AsyncClient):
        for _ in range(11):
            await client.get(
                "/api/auth/logout",
                headers={"X-Forwarded-For": "10.0.0.1"},
                follow_redirects=False,
            )

        response = await client.get(
            "/api/auth/logout",
            headers={"X-Forwarded-For": "10.0.0.2"},
            follow_redirects=False,
        )
        assert response.status_code == 302

    @pytest.mark.asyncio
    async def test_other_paths_are_not_throttled(self, client: AsyncClient):
        for _ in range(12):
            response = await client.get("/api/graph")
            assert response.status_code == 200


class TestUpsertGitHubUser:
    """Tests for matching GitHub accounts to users."""

    @pytest.mark.asyncio
    async def test_creates_new_user(self, db_session: AsyncSession):
        user = await upsert_github_user(
            db_session,
            GitHubUser(id=42, login="reader", email="reader@example.com", name="A Reader"),
        )
        assert user.id is not None
        assert user.username == "reader"
        assert user.display_name == "A Reader"
        assert user.github_id == 42

    @pytest.mark.asyncio
    async def test_matches_existing_by_github_id(self, db_session: AsyncSession, test_user: User):
        user = await upsert_github_user(
            db_session,
            GitHubUser(id=12345, login="renamed", avatar_url="https://avatars.example/x.png"),
        )
        assert user.id == test_user.id
        assert user.avatar_url == "https://avatars.example/x.png"

    @pytest.mark.asyncio
    async def test_links_existing_account_by_email(self, db_session: AsyncSession):
        existing = User(username="byemail", email="shared@example.com")
        db_session.add(existing)
        await db_session.commit()

        user = await upsert_github_user(
            db_session, GitHubUser(id=777, login="someone", email="shared@example.com")
        )
        assert user.id == existing.id
        assert user.github_id == 777

    @pytest.mark.asyncio
    async def test_admin_usernames_grant_admin(self, db_session: AsyncSession):
        with patch.object(auth_api.settings, "admin_usernames", "Librarian, other"):
            user = await upsert_github_user(db_session, GitHubUser(id=99, login="librarian"))
        assert user.is_admin is True


class TestGitHubUser:
    """Tests for the GitHub profile model."""

    def test_blank_fields_become_none(self):
        github_user = GitHubUser.model_validate(
            {"id": 1, "login": "reader", "email": "", "name": "  ", "avatar_url": None}
        )
        assert github_user.email is None
        assert github_user.name is None
        assert github_user.avatar_url is None

    def test_is_admin_ignores_case(self):
        github_user = GitHubUser(id=1, login="Librarian")
        assert github_user.is_admin({"librarian"}) is True
        assert github_user.is_admin({"someone"}) is False
