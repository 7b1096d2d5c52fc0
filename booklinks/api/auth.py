"""Authentication API endpoints."""

import logging
import secrets
from typing import Annotated, Any
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.auth import get_current_user
from booklinks.auth.models import GitHubUser
from booklinks.config import get_settings
from booklinks.constants import HTTPX_TIMEOUT
from booklinks.db import get_db
from booklinks.models.schemas import UserRead
from booklinks.models.user import User

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)

# GitHub OAuth URLs
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"


# ============== OAuth Helpers ==============


async def _exchange_token_and_get_user(code: str) -> dict[str, Any]:
    """Exchange the OAuth code for a token and fetch the GitHub profile."""
    async with httpx.AsyncClient(timeout=HTTPX_TIMEOUT) as client:
        token_response = await client.post(
            GITHUB_TOKEN_URL,
            data={
                "client_id": settings.github_client_id,
                "client_secret": settings.github_client_secret,
                "code": code,
                "redirect_uri": f"{settings.app_url}/api/auth/github/callback",
            },
            headers={"Accept": "application/json"},
        )

        if token_response.status_code != 200:
            raise HTTPException(status_code=400, detail="Failed to get access token")

        token_result = token_response.json()
        if "error" in token_result:
            raise HTTPException(
                status_code=400, detail=token_result.get("error_description", "OAuth error")
            )

        access_token = token_result.get("access_token")
        if not access_token:
            raise HTTPException(status_code=400, detail="No access token received")

        user_response = await client.get(
            GITHUB_USER_URL,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

        if user_response.status_code != 200:
            raise HTTPException(status_code=400, detail="Failed to get user info")

        return user_response.json()


async def upsert_github_user(db: AsyncSession, github_user: GitHubUser) -> User:
    """Find the user for a GitHub account (by id, then email) or create one."""
    result = await db.execute(select(User).where(User.github_id == github_user.id))
    user = result.scalar_one_or_none()

    if not user and github_user.email:
        result = await db.execute(select(User).where(User.email == github_user.email))
        user = result.scalar_one_or_none()
        if user:
            user.github_id = github_user.id

    if not user:
        user = User(
            github_id=github_user.id,
            username=github_user.login,
            email=github_user.email,
            avatar_url=github_user.avatar_url,
            display_name=github_user.name,
        )
        db.add(user)
    else:
        user.avatar_url = github_user.avatar_url
        if github_user.email and not user.email:
            user.email = github_user.email

    if github_user.is_admin(settings.admin_username_set):
        user.is_admin = True

    await db.flush()
    return user


# ============== GitHub OAuth ==============


@router.get("/github/login")
async def github_login(request: Request) -> RedirectResponse:
    """Initiate GitHub OAuth login."""
    state = secrets.token_urlsafe(32)
    request.session["oauth_state"] = state

    params = {
        "client_id": settings.github_client_id,
        "redirect_uri": f"{settings.app_url}/api/auth/github/callback",
        "scope": "user:email",
        "state": state,
    }
    url = f"{GITHUB_AUTHORIZE_URL}?{urlencode(params)}"
    return RedirectResponse(url=url, status_code=302)


@router.get("/github/callback")
async def github_callback(
    request: Request,
    code: str,
    state: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """Handle GitHub OAuth callback."""
    # Verify state - if invalid, clear session and restart OAuth flow
    stored_state = request.session.get("oauth_state")
    if not stored_state or stored_state != state:
        request.session.clear()
        return RedirectResponse(url="/api/auth/github/login", status_code=302)

    del request.session["oauth_state"]

    profile = await _exchange_token_and_get_user(code)
    try:
        github_user = GitHubUser.model_validate(profile)
    except ValidationError as e:
        logger.warning(f"Unexpected GitHub profile payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid GitHub profile") from e

    user = await upsert_github_user(db, github_user)
    await db.commit()
    logger.info(f"User {user.username} logged in")

    request.session["user_id"] = user.id
    request.session["username"] = user.username
    return RedirectResponse(url="/", status_code=302)


# ============== Common ==============


@router.get("/logout")
async def logout(request: Request) -> RedirectResponse:
    """Log out the current user."""
    request.session.clear()
    return RedirectResponse(url="/", status_code=302)


@router.get("/me", response_model=UserRead)
async def get_me(user: Annotated[User, Depends(get_current_user)]) -> User:
    """Get current authenticated user."""
    return user
