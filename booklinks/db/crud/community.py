"""CRUD operations for reference upvotes and comments."""

from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.db.crud.common import insert_for
from booklinks.models.community import ReferenceComment, ReferenceUpvote


async def count_upvotes(db: AsyncSession, reference_id: int) -> int:
    """Number of upvotes on a reference."""
    result = await db.execute(
        select(func.count(ReferenceUpvote.id)).where(ReferenceUpvote.reference_id == reference_id)
    )
    return result.scalar_one()


async def has_upvoted(db: AsyncSession, reference_id: int, user_id: int) -> bool:
    """Whether ``user_id`` currently upvotes the reference."""
    result = await db.execute(
        select(ReferenceUpvote.id).where(
            ReferenceUpvote.reference_id == reference_id,
            ReferenceUpvote.user_id == user_id,
        )
    )
    return result.first() is not None


async def toggle_upvote(db: AsyncSession, reference_id: int, user_id: int) -> tuple[bool, int]:
    """Flip the user's upvote. Returns (upvoted now, new count)."""
    removed = await db.execute(
        delete(ReferenceUpvote).where(
            ReferenceUpvote.reference_id == reference_id,
            ReferenceUpvote.user_id == user_id,
        )
    )

    upvoted = False
    if removed.rowcount == 0:
        await db.execute(
            insert_for(db, ReferenceUpvote)
            .values(reference_id=reference_id, user_id=user_id)
            .on_conflict_do_nothing(index_elements=["user_id", "reference_id"])
        )
        upvoted = True

    return upvoted, await count_upvotes(db, reference_id)


async def get_comments(db: AsyncSession, reference_id: int) -> Sequence[ReferenceComment]:
    """Comments on a reference, oldest first."""
    result = await db.execute(
        select(ReferenceComment)
        .where(ReferenceComment.reference_id == reference_id)
        .order_by(ReferenceComment.created_at, ReferenceComment.id)
    )
    return result.unique().scalars().all()


async def get_comment(db: AsyncSession, comment_id: int) -> ReferenceComment | None:
    """Get a comment by id."""
    return await db.get(ReferenceComment, comment_id)


async def create_comment(
    db: AsyncSession, reference_id: int, user_id: int, content: str
) -> ReferenceComment:
    """Add a comment to a reference."""
    comment = ReferenceComment(reference_id=reference_id, user_id=user_id, content=content)
    db.add(comment)
    await db.flush()
    await db.refresh(comment, ["user", "created_at"])
    return comment


async def delete_comment(db: AsyncSession, comment: ReferenceComment) -> None:
    """Delete a comment."""
    await db.delete(comment)
    await db.flush()
