"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.auth import get_current_user
from booklinks.db import get_db
from booklinks.models.schemas import ProfileUpdate, UserRead
from booklinks.models.user import User

router = APIRouter()


@router.get("/profile", response_model=UserRead)
async def get_profile(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current user's profile."""
    return user


@router.patch("/profile", response_model=UserRead)
async def update_profile(
    data: ProfileUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Update display name and bio. Blank values clear the field."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if isinstance(value, str):
            value = value.strip() or None
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    return user
