"""Feedback API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.auth import get_admin_user, get_current_user, get_optional_user
from booklinks.db import get_db
from booklinks.db.crud import create_feedback, get_feedback, list_feedback, update_feedback
from booklinks.models.feedback import FeedbackStatus, FeedbackType
from booklinks.models.schemas import FeedbackCreate, FeedbackRead, FeedbackUpdate
from booklinks.models.user import User
from booklinks.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("", response_model=FeedbackRead, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    data: FeedbackCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> FeedbackRead:
    """Submit feedback. Anonymous submissions are accepted."""
    feedback = await create_feedback(db, data, user)
    logger.info(f"Feedback {feedback.id} ({feedback.type.value}) received")
    return FeedbackRead.model_validate(feedback)


@router.get("", response_model=list[FeedbackRead])
async def get_feedback_list(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: Annotated[FeedbackStatus | None, Query(alias="status")] = None,
    type_filter: Annotated[FeedbackType | None, Query(alias="type")] = None,
) -> list[FeedbackRead]:
    """Feedback newest first: all of it for admins, the caller's own otherwise."""
    items = await list_feedback(
        db,
        user_id=None if user.is_admin else user.id,
        status=status_filter,
        feedback_type=type_filter,
    )
    return [FeedbackRead.model_validate(item) for item in items]


@router.patch("/{feedback_id}", response_model=FeedbackRead)
async def triage_feedback(
    feedback_id: int,
    data: FeedbackUpdate,
    admin: Annotated[User, Depends(get_admin_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FeedbackRead:
    """Change a feedback item's status or notes (admins only)."""
    feedback = await get_feedback(db, feedback_id)
    if feedback is None:
        raise HTTPException(status_code=404, detail="Feedback not found")

    feedback = await update_feedback(db, feedback, data)
    logger.info(f"Admin {admin.id} set feedback {feedback_id} to {feedback.status.value}")
    return FeedbackRead.model_validate(feedback)
