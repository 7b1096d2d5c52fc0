"""Reading list API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.auth import get_current_user, get_optional_user
from booklinks.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from booklinks.db import get_db
from booklinks.db.crud import (
    add_item,
    create_list,
    delete_list,
    get_book,
    get_item_counts,
    get_list,
    get_list_by_slug,
    get_lists_containing,
    get_public_lists,
    get_user_lists,
    remove_item,
    update_list,
)
from booklinks.models.reading_list import ReadingList
from booklinks.models.schemas import (
    ReadingListCreate,
    ReadingListItemCreate,
    ReadingListItemRead,
    ReadingListRead,
    ReadingListSummary,
    ReadingListUpdate,
)
from booklinks.models.user import User

router = APIRouter()


def _summary(
    reading_list: ReadingList, item_count: int, contains_book: bool | None = None
) -> ReadingListSummary:
    return ReadingListSummary(
        id=reading_list.id,
        name=reading_list.name,
        description=reading_list.description,
        slug=reading_list.slug,
        is_public=reading_list.is_public,
        user_id=reading_list.user_id,
        owner_name=reading_list.user.public_name if reading_list.user else None,
        item_count=item_count,
        contains_book=contains_book,
        created_at=reading_list.created_at,
    )


def _detail(reading_list: ReadingList) -> ReadingListRead:
    summary = _summary(reading_list, len(reading_list.items))
    return ReadingListRead(
        **summary.model_dump(),
        items=[ReadingListItemRead.model_validate(item) for item in reading_list.items],
    )


async def _get_owned_list(db: AsyncSession, list_id: int, user: User) -> ReadingList:
    reading_list = await get_list(db, list_id)
    if reading_list is None:
        raise HTTPException(status_code=404, detail="Reading list not found")
    if reading_list.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not the owner of this list")
    return reading_list


@router.get("", response_model=list[ReadingListSummary])
async def list_public(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[ReadingListSummary]:
    """Public reading lists, newest first."""
    lists = await get_public_lists(db, limit=limit, offset=offset)
    counts = await get_item_counts(db, [rl.id for rl in lists])
    return [_summary(rl, counts.get(rl.id, 0)) for rl in lists]


@router.get("/mine", response_model=list[ReadingListSummary])
async def list_mine(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    book_id: int | None = None,
) -> list[ReadingListSummary]:
    """The caller's lists; with ``book_id``, flags the lists already holding that book."""
    lists = await get_user_lists(db, user.id)
    ids = [rl.id for rl in lists]
    counts = await get_item_counts(db, ids)

    containing: set[int] = set()
    if book_id is not None:
        containing = await get_lists_containing(db, ids, book_id)

    return [
        _summary(
            rl,
            counts.get(rl.id, 0),
            contains_book=(rl.id in containing) if book_id is not None else None,
        )
        for rl in lists
    ]


@router.post("", response_model=ReadingListRead, status_code=status.HTTP_201_CREATED)
async def create(
    data: ReadingListCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReadingListRead:
    """Create a reading list, optionally with a first book."""
    if data.book_id is not None and await get_book(db, data.book_id) is None:
        raise HTTPException(status_code=404, detail="Book not found")

    reading_list = await create_list(db, user.id, data)
    reading_list = await get_list(db, reading_list.id)
    return _detail(reading_list)


@router.get("/{slug}", response_model=ReadingListRead)
async def get_by_slug(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> ReadingListRead:
    """A reading list with its items. Private lists are only visible to their owner."""
    reading_list = await get_list_by_slug(db, slug)
    if reading_list is None or (
        not reading_list.is_public and (user is None or user.id != reading_list.user_id)
    ):
        raise HTTPException(status_code=404, detail="Reading list not found")
    return _detail(reading_list)


@router.patch("/{list_id}", response_model=ReadingListRead)
async def update(
    list_id: int,
    data: ReadingListUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReadingListRead:
    """Rename a list, edit its description or change its visibility."""
    reading_list = await _get_owned_list(db, list_id, user)
    await update_list(db, reading_list, data)
    return _detail(await get_list(db, list_id))


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    list_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a list."""
    reading_list = await _get_owned_list(db, list_id, user)
    await delete_list(db, reading_list)


@router.post("/{list_id}/items", response_model=ReadingListRead)
async def add_book_to_list(
    list_id: int,
    data: ReadingListItemCreate,
    response: Response,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReadingListRead:
    """Append a book to a list. Adding a book already in the list changes nothing."""
    await _get_owned_list(db, list_id, user)
    if await get_book(db, data.book_id) is None:
        raise HTTPException(status_code=404, detail="Book not found")

    if await add_item(db, list_id, data.book_id, data.notes):
        response.status_code = status.HTTP_201_CREATED
    return _detail(await get_list(db, list_id))


@router.delete("/{list_id}/items/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_book_from_list(
    list_id: int,
    book_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Remove a book from a list."""
    await _get_owned_list(db, list_id, user)
    if not await remove_item(db, list_id, book_id):
        raise HTTPException(status_code=404, detail="Book not in this list")
