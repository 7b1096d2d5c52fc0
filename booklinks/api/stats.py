"""Platform statistics API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.constants import CACHE_TTL_STATS, DEFAULT_COVER_URL, STATS_TOP_BOOKS
from booklinks.db import get_db
from booklinks.models.book import Book, BookReference
from booklinks.utils.cache import STATS_CACHE_KEY, cache

router = APIRouter()


class DailyCount(BaseModel):
    """Books added on one day."""

    day: str  # YYYY-MM-DD
    count: int


class ReferencedBook(BaseModel):
    """Book ranked by how often other books reference it."""

    slug: str
    title: str
    author: str
    cover_url: str
    reference_count: int


class ConnectedBook(BaseModel):
    """Book ranked by edges in either direction."""

    slug: str
    title: str
    author: str
    cover_url: str
    outgoing: int
    incoming: int
    total: int


class StatsResponse(BaseModel):
    """Full statistics response."""

    total_books: int
    total_references: int
    daily_counts: list[DailyCount]
    most_referenced: list[ReferencedBook]
    most_connected: list[ConnectedBook]


async def compute_stats(db: AsyncSession) -> StatsResponse:
    """Run the statistics queries. One session, so queries run one after another."""
    total_books = (await db.execute(select(func.count(Book.id)))).scalar_one()
    total_references = (await db.execute(select(func.count(BookReference.id)))).scalar_one()

    day = func.date(Book.created_at).label("day")
    daily_result = await db.execute(
        select(day, func.count(Book.id).label("count")).group_by(day).order_by(day)
    )
    daily_counts = [DailyCount(day=str(row.day), count=row.count) for row in daily_result.all()]

    incoming = (
        select(
            BookReference.referenced_book_id.label("book_id"),
            func.count(BookReference.id).label("cnt"),
        )
        .group_by(BookReference.referenced_book_id)
        .subquery()
    )
    outgoing = (
        select(
            BookReference.source_book_id.label("book_id"),
            func.count(BookReference.id).label("cnt"),
        )
        .group_by(BookReference.source_book_id)
        .subquery()
    )

    referenced_result = await db.execute(
        select(Book, incoming.c.cnt)
        .join(incoming, incoming.c.book_id == Book.id)
        .order_by(incoming.c.cnt.desc(), Book.title)
        .limit(STATS_TOP_BOOKS)
    )
    most_referenced = [
        ReferencedBook(
            slug=book.slug,
            title=book.title,
            author=book.author,
            cover_url=book.cover_url or DEFAULT_COVER_URL,
            reference_count=count,
        )
        for book, count in referenced_result.all()
    ]

    in_count = func.coalesce(incoming.c.cnt, 0)
    out_count = func.coalesce(outgoing.c.cnt, 0)
    total = (in_count + out_count).label("total")
    connected_result = await db.execute(
        select(Book, out_count.label("outgoing"), in_count.label("incoming"), total)
        .outerjoin(incoming, incoming.c.book_id == Book.id)
        .outerjoin(outgoing, outgoing.c.book_id == Book.id)
        .where(total > 0)
        .order_by(total.desc(), Book.title)
        .limit(STATS_TOP_BOOKS)
    )
    most_connected = [
        ConnectedBook(
            slug=book.slug,
            title=book.title,
            author=book.author,
            cover_url=book.cover_url or DEFAULT_COVER_URL,
            outgoing=out_n,
            incoming=in_n,
            total=total_n,
        )
        for book, out_n, in_n, total_n in connected_result.all()
    ]

    return StatsResponse(
        total_books=total_books,
        total_references=total_references,
        daily_counts=daily_counts,
        most_referenced=most_referenced,
        most_connected=most_connected,
    )


@router.get("", response_model=StatsResponse)
async def get_stats(db: Annotated[AsyncSession, Depends(get_db)]) -> StatsResponse:
    """Platform-wide statistics (cached)."""
    cached = await cache.get(STATS_CACHE_KEY)
    if cached is not None:
        return StatsResponse.model_validate(cached)

    stats = await compute_stats(db)
    await cache.set(STATS_CACHE_KEY, stats.model_dump(), CACHE_TTL_STATS)
    return stats
