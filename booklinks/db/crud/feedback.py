"""CRUD operations for feedback."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.constants import MAX_PAGE_SIZE
from booklinks.models.feedback import Feedback, FeedbackStatus, FeedbackType
from booklinks.models.schemas import FeedbackCreate, FeedbackUpdate
from booklinks.models.user import User


async def create_feedback(
    db: AsyncSession, data: FeedbackCreate, user: User | None = None
) -> Feedback:
    """Store a feedback message. Logged-in users default to their account email."""
    feedback = Feedback(
        type=FeedbackType(data.type.value),
        message=data.message,
        email=data.email or (user.email if user else None),
        page_url=data.page_url,
        user_id=user.id if user else None,
        status=FeedbackStatus.NEW,
    )
    db.add(feedback)
    await db.flush()
    await db.refresh(feedback)
    return feedback


async def get_feedback(db: AsyncSession, feedback_id: int) -> Feedback | None:
    """Get a feedback item by id."""
    return await db.get(Feedback, feedback_id)


async def list_feedback(
    db: AsyncSession,
    user_id: int | None = None,
    status: FeedbackStatus | None = None,
    feedback_type: FeedbackType | None = None,
    limit: int = MAX_PAGE_SIZE,
) -> Sequence[Feedback]:
    """Feedback newest first, optionally restricted to one submitter."""
    query = select(Feedback)
    if user_id is not None:
        query = query.where(Feedback.user_id == user_id)
    if status is not None:
        query = query.where(Feedback.status == status)
    if feedback_type is not None:
        query = query.where(Feedback.type == feedback_type)

    result = await db.execute(
        query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).limit(limit)
    )
    return result.unique().scalars().all()


async def update_feedback(db: AsyncSession, feedback: Feedback, data: FeedbackUpdate) -> Feedback:
    """Apply an admin's triage update."""
    if data.status is not None:
        feedback.status = FeedbackStatus(data.status.value)
    if data.admin_notes is not None:
        feedback.admin_notes = data.admin_notes
    await db.flush()
    await db.refresh(feedback)
    return feedback
