"""CRUD operations for reading lists."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.constants import DEFAULT_PAGE_SIZE
from booklinks.db.crud.common import insert_for
from booklinks.models.reading_list import ReadingList, ReadingListItem
from booklinks.models.schemas import ReadingListCreate, ReadingListUpdate
from booklinks.utils.slugs import reading_list_slug


async def get_list(db: AsyncSession, list_id: int) -> ReadingList | None:
    """Get a reading list by id."""
    return await db.get(ReadingList, list_id, populate_existing=True)


async def get_list_by_slug(db: AsyncSession, slug: str) -> ReadingList | None:
    """Get a reading list (with items) by slug."""
    result = await db.execute(
        select(ReadingList)
        .where(ReadingList.slug == slug)
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()


async def get_item_counts(db: AsyncSession, list_ids: Sequence[int]) -> dict[int, int]:
    """Number of items per list."""
    if not list_ids:
        return {}
    result = await db.execute(
        select(ReadingListItem.reading_list_id, func.count(ReadingListItem.id))
        .where(ReadingListItem.reading_list_id.in_(list_ids))
        .group_by(ReadingListItem.reading_list_id)
    )
    return {list_id: count for list_id, count in result.all()}


async def get_public_lists(
    db: AsyncSession, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0
) -> Sequence[ReadingList]:
    """Public lists, newest first."""
    result = await db.execute(
        select(ReadingList)
        .where(ReadingList.is_public.is_(True))
        .order_by(ReadingList.created_at.desc(), ReadingList.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return result.unique().scalars().all()


async def get_user_lists(db: AsyncSession, user_id: int) -> Sequence[ReadingList]:
    """A user's lists, newest first."""
    result = await db.execute(
        select(ReadingList)
        .where(ReadingList.user_id == user_id)
        .order_by(ReadingList.created_at.desc(), ReadingList.id.desc())
    )
    return result.unique().scalars().all()


async def get_lists_containing(
    db: AsyncSession, list_ids: Sequence[int], book_id: int
) -> set[int]:
    """Ids among ``list_ids`` that already hold ``book_id``."""
    if not list_ids:
        return set()
    result = await db.execute(
        select(ReadingListItem.reading_list_id).where(
            ReadingListItem.reading_list_id.in_(list_ids),
            ReadingListItem.book_id == book_id,
        )
    )
    return set(result.scalars().all())


async def create_list(db: AsyncSession, user_id: int, data: ReadingListCreate) -> ReadingList:
    """Create a list, optionally seeded with a first book."""
    reading_list = ReadingList(
        user_id=user_id,
        name=data.name.strip(),
        description=data.description,
        slug=reading_list_slug(data.name),
        is_public=data.is_public,
    )
    db.add(reading_list)
    await db.flush()

    if data.book_id is not None:
        await add_item(db, reading_list.id, data.book_id)

    await db.refresh(reading_list, ["items"])
    return reading_list


async def update_list(
    db: AsyncSession, reading_list: ReadingList, data: ReadingListUpdate
) -> ReadingList:
    """Apply the fields present in ``data``."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(reading_list, field, value)
    await db.flush()
    await db.refresh(reading_list)
    return reading_list


async def delete_list(db: AsyncSession, reading_list: ReadingList) -> None:
    """Delete a list and its items."""
    await db.delete(reading_list)
    await db.flush()


async def add_item(
    db: AsyncSession, list_id: int, book_id: int, notes: str | None = None
) -> bool:
    """Append a book at the end of a list.

    Returns False when the book was already in the list (nothing changes).
    """
    next_position = (
        select(func.coalesce(func.max(ReadingListItem.position), -1) + 1)
        .where(ReadingListItem.reading_list_id == list_id)
        .scalar_subquery()
    )
    stmt = (
        insert_for(db, ReadingListItem)
        .values(reading_list_id=list_id, book_id=book_id, position=next_position, notes=notes)
        .on_conflict_do_nothing(index_elements=["reading_list_id", "book_id"])
        .returning(ReadingListItem.id)
    )
    new_id = (await db.execute(stmt)).scalar_one_or_none()
    return new_id is not None


async def remove_item(db: AsyncSession, list_id: int, book_id: int) -> bool:
    """Remove a book from a list. Returns False when it was not there."""
    result = await db.execute(
        select(ReadingListItem).where(
            ReadingListItem.reading_list_id == list_id,
            ReadingListItem.book_id == book_id,
        )
    )
    item = result.unique().scalar_one_or_none()
    if item is None:
        return False
    await db.delete(item)
    await db.flush()
    return True
