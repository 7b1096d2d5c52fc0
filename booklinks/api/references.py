"""Reference edge endpoints: deletion, upvotes and comments."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.auth import get_current_user, get_optional_user
from booklinks.db import get_db
from booklinks.db.crud import (
    count_upvotes,
    create_comment,
    delete_comment,
    delete_reference,
    get_comment,
    get_comments,
    get_reference,
    has_upvoted,
    toggle_upvote,
)
from booklinks.models.book import BookReference
from booklinks.models.community import ReferenceComment
from booklinks.models.schemas import CommentCreate, CommentRead, UpvoteStatus
from booklinks.models.user import User
from booklinks.utils.cache import invalidate_stats_cache
from booklinks.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


async def _get_reference_or_404(db: AsyncSession, reference_id: int) -> BookReference:
    reference = await get_reference(db, reference_id)
    if reference is None:
        raise HTTPException(status_code=404, detail="Reference not found")
    return reference


def _comment_read(comment: ReferenceComment) -> CommentRead:
    return CommentRead(
        id=comment.id,
        reference_id=comment.reference_id,
        user_id=comment.user_id,
        display_name=comment.user.public_name,
        content=comment.content,
        created_at=comment.created_at,
    )


@router.delete("/references/{reference_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_reference(
    reference_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a reference. Allowed for the user who added it and for admins."""
    reference = await _get_reference_or_404(db, reference_id)
    if reference.added_by != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to delete this reference")

    await delete_reference(db, reference)
    await invalidate_stats_cache()
    logger.info(f"User {user.id} deleted reference {reference_id}")


# ============== Upvotes ==============


@router.get("/references/{reference_id}/upvotes")
async def get_upvotes(
    reference_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> dict:
    """Upvote count, and whether the caller has upvoted."""
    await _get_reference_or_404(db, reference_id)
    return {
        "count": await count_upvotes(db, reference_id),
        "user_has_upvoted": await has_upvoted(db, reference_id, user.id) if user else False,
    }


@router.post("/references/{reference_id}/upvote", response_model=UpvoteStatus)
async def upvote(
    reference_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UpvoteStatus:
    """Toggle the caller's upvote on a reference."""
    await _get_reference_or_404(db, reference_id)
    upvoted, count = await toggle_upvote(db, reference_id, user.id)
    return UpvoteStatus(upvoted=upvoted, count=count)


# ============== Comments ==============


@router.get("/references/{reference_id}/comments", response_model=list[CommentRead])
async def list_comments(
    reference_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CommentRead]:
    """Comments on a reference, oldest first."""
    await _get_reference_or_404(db, reference_id)
    return [_comment_read(c) for c in await get_comments(db, reference_id)]


@router.post(
    "/references/{reference_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    reference_id: int,
    data: CommentCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CommentRead:
    """Comment on a reference."""
    await _get_reference_or_404(db, reference_id)
    comment = await create_comment(db, reference_id, user.id, data.content)
    return _comment_read(comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete one of the caller's own comments."""
    comment = await get_comment(db, comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not the author of this comment")
    await delete_comment(db, comment)
