"""Book catalogue API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.auth import get_current_user, get_optional_user
from booklinks.constants import DEFAULT_COVER_URL, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from booklinks.db import get_db
from booklinks.db.crud import create_book, get_book_by_slug, insert_reference, search_books
from booklinks.models.book import ReferenceSource
from booklinks.models.schemas import (
    BookCreate,
    BookDetail,
    BookRead,
    BookSearchResult,
    GoogleBookResult,
    ReferenceCreate,
    ReferenceCreated,
    ReferenceRead,
)
from booklinks.models.user import User
from booklinks.services.graph import get_book_detail
from booklinks.services.metadata.google_books import google_books_service
from booklinks.utils.cache import invalidate_stats_cache
from booklinks.utils.logging import get_logger
from booklinks.utils.slugs import slugify

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=list[BookSearchResult])
async def list_books(
    db: Annotated[AsyncSession, Depends(get_db)],
    q: Annotated[str | None, Query(max_length=200)] = None,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> list[BookSearchResult]:
    """Search the local catalogue by title or author; newest books without a query."""
    rows = await search_books(db, q.strip() if q else None, limit)
    return [
        BookSearchResult(
            id=book.id,
            slug=book.slug,
            title=book.title,
            author=book.author,
            description=book.description,
            cover_url=book.cover_url or DEFAULT_COVER_URL,
            reference_count=count,
        )
        for book, count in rows
    ]


@router.get("/search/google", response_model=list[GoogleBookResult])
async def search_google_books(
    q: Annotated[str, Query(min_length=1, max_length=200)],
) -> list[GoogleBookResult]:
    """Search Google Books for a book to add."""
    results = await google_books_service.search_books(q)
    return [
        GoogleBookResult(
            google_id=r["google_id"],
            slug=slugify(r["title"]),
            title=r["title"],
            author=r["author"],
            description=r["description"],
            cover_url=r["cover_url"],
        )
        for r in results
    ]


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def add_book(
    data: BookCreate,
    response: Response,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookRead:
    """Add a book; an existing book with the same slug is returned as is."""
    if not slugify(data.title):
        raise HTTPException(status_code=400, detail="Title must contain letters or digits")

    book, created = await create_book(
        db,
        title=data.title,
        author=data.author,
        description=data.description,
        cover_url=data.cover_url,
        added_by=user.id,
    )
    if created:
        logger.info(f"User {user.id} added book {book.slug}")
        await invalidate_stats_cache()
    else:
        response.status_code = status.HTTP_200_OK

    return BookRead.model_validate(book)


@router.get("/{slug}", response_model=BookDetail)
async def get_book(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    country: Annotated[str | None, Query(min_length=2, max_length=2)] = None,
) -> BookDetail:
    """Book detail with its references in both directions."""
    detail = await get_book_detail(db, slug, viewer=user, country=country)
    if detail is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return BookDetail.model_validate(detail)


@router.post("/{slug}/references", response_model=ReferenceCreated)
async def add_reference(
    slug: str,
    data: ReferenceCreate,
    response: Response,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReferenceCreated:
    """Record that the book at ``slug`` references another book."""
    source = await get_book_by_slug(db, slug)
    if source is None:
        raise HTTPException(status_code=404, detail="Book not found")

    referenced_slug = slugify(data.title)
    if not referenced_slug:
        raise HTTPException(status_code=400, detail="Title must contain letters or digits")
    if referenced_slug == source.slug:
        raise HTTPException(status_code=400, detail="A book cannot reference itself")

    referenced, _ = await create_book(
        db,
        title=data.title,
        author=data.author,
        description=data.description,
        cover_url=data.cover_url,
        added_by=user.id,
    )

    reference = await insert_reference(
        db,
        source_book_id=source.id,
        referenced_book_id=referenced.id,
        source=ReferenceSource.USER,
        context=data.context,
        added_by=user.id,
    )

    if reference is None:
        return ReferenceCreated(created=False, referenced_book=BookRead.model_validate(referenced))

    await invalidate_stats_cache()
    response.status_code = status.HTTP_201_CREATED
    return ReferenceCreated(
        created=True,
        reference=ReferenceRead.model_validate(reference),
        referenced_book=BookRead.model_validate(referenced),
    )
