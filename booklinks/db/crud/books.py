"""CRUD operations for books and reference edges."""

from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from booklinks.constants import DEFAULT_PAGE_SIZE, UNKNOWN_AUTHOR
from booklinks.db.crud.common import insert_for
from booklinks.models.book import Book, BookReference, ReferenceSource
from booklinks.models.community import ReferenceUpvote
from booklinks.utils.slugs import slugify


# =============================================================================
# Books
# =============================================================================


async def get_book(db: AsyncSession, book_id: int) -> Book | None:
    """Get a book by id."""
    return await db.get(Book, book_id)


async def get_book_by_slug(db: AsyncSession, slug: str) -> Book | None:
    """Get a book by its slug."""
    result = await db.execute(select(Book).where(Book.slug == slug))
    return result.scalar_one_or_none()


async def create_book(
    db: AsyncSession,
    title: str,
    author: str | None = None,
    description: str | None = None,
    cover_url: str | None = None,
    added_by: int | None = None,
) -> tuple[Book, bool]:
    """Insert a book unless one with the same slug exists.

    Returns (book, created). A concurrent insert of the same slug is not an
    error: the existing row is returned with ``created=False``.
    """
    slug = slugify(title)
    if not slug:
        raise ValueError(f"title {title!r} has no slug")

    stmt = (
        insert_for(db, Book)
        .values(
            slug=slug,
            title=title,
            author=author or UNKNOWN_AUTHOR,
            description=description,
            cover_url=cover_url,
            added_by=added_by,
        )
        .on_conflict_do_nothing(index_elements=["slug"])
        .returning(Book.id)
    )
    new_id = (await db.execute(stmt)).scalar_one_or_none()

    book = await get_book_by_slug(db, slug)
    if book is None:  # pragma: no cover - row vanished between statements
        raise LookupError(f"book {slug!r} not found after insert")
    return book, new_id is not None


async def mark_references_discovered(db: AsyncSession, book: Book) -> None:
    """Flag discovery as done for ``book``."""
    book.references_discovered = True
    book.references_discovered_at = datetime.now(UTC)
    await db.flush()


async def search_books(
    db: AsyncSession, query: str | None = None, limit: int = DEFAULT_PAGE_SIZE
) -> list[tuple[Book, int]]:
    """Books matching ``query`` in title or author, with outgoing reference counts.

    Without a query the most recently added books are returned.
    """
    ref_count = (
        select(BookReference.source_book_id, func.count(BookReference.id).label("cnt"))
        .group_by(BookReference.source_book_id)
        .subquery()
    )

    stmt = select(Book, func.coalesce(ref_count.c.cnt, 0)).outerjoin(
        ref_count, ref_count.c.source_book_id == Book.id
    )

    if query:
        pattern = f"%{query.strip()}%"
        stmt = stmt.where(or_(Book.title.ilike(pattern), Book.author.ilike(pattern)))
        stmt = stmt.order_by(Book.title)
    else:
        stmt = stmt.order_by(Book.created_at.desc(), Book.id.desc())

    result = await db.execute(stmt.limit(limit))
    return [(book, count) for book, count in result.all()]


# =============================================================================
# References
# =============================================================================


async def get_reference(db: AsyncSession, reference_id: int) -> BookReference | None:
    """Get a reference edge by id (both endpoints loaded)."""
    return await db.get(BookReference, reference_id)


async def reference_exists(db: AsyncSession, source_book_id: int, referenced_book_id: int) -> bool:
    """Check whether the ordered (source, referenced) pair is already stored."""
    result = await db.execute(
        select(BookReference.id).where(
            BookReference.source_book_id == source_book_id,
            BookReference.referenced_book_id == referenced_book_id,
        )
    )
    return result.first() is not None


async def insert_reference(
    db: AsyncSession,
    source_book_id: int,
    referenced_book_id: int,
    source: ReferenceSource = ReferenceSource.USER,
    context: str | None = None,
    source_url: str | None = None,
    source_verified: bool = False,
    added_by: int | None = None,
) -> BookReference | None:
    """Insert a reference edge.

    Returns the new edge, or None when the pair already existed (the
    uniqueness conflict is a no-op, not an error).
    """
    now = datetime.now(UTC)
    stmt = (
        insert_for(db, BookReference)
        .values(
            source_book_id=source_book_id,
            referenced_book_id=referenced_book_id,
            source=source,
            context=context,
            source_url=source_url,
            source_verified=source_verified,
            verification_date=now if source_verified else None,
            added_by=added_by,
            created_at=now,
        )
        .on_conflict_do_nothing(index_elements=["source_book_id", "referenced_book_id"])
        .returning(BookReference.id)
    )
    new_id = (await db.execute(stmt)).scalar_one_or_none()
    if new_id is None:
        return None
    return await get_reference(db, new_id)


async def delete_reference(db: AsyncSession, reference: BookReference) -> None:
    """Delete a reference edge along with its upvotes and comments."""
    await db.delete(reference)
    await db.flush()


async def get_book_edges(
    db: AsyncSession, book_id: int
) -> tuple[Sequence[BookReference], Sequence[BookReference]]:
    """Edges where the book is the source, and edges where it is the target."""
    outgoing = await db.execute(
        select(BookReference)
        .where(BookReference.source_book_id == book_id)
        .order_by(BookReference.id)
    )
    incoming = await db.execute(
        select(BookReference)
        .where(BookReference.referenced_book_id == book_id)
        .order_by(BookReference.id)
    )
    return outgoing.scalars().unique().all(), incoming.scalars().unique().all()


async def get_upvote_counts(
    db: AsyncSession, reference_ids: Sequence[int], user_id: int | None = None
) -> tuple[dict[int, int], set[int]]:
    """Upvote count per reference, plus the ids the given user has upvoted."""
    if not reference_ids:
        return {}, set()

    result = await db.execute(
        select(ReferenceUpvote.reference_id, func.count(ReferenceUpvote.id))
        .where(ReferenceUpvote.reference_id.in_(reference_ids))
        .group_by(ReferenceUpvote.reference_id)
    )
    counts = {ref_id: count for ref_id, count in result.all()}

    upvoted: set[int] = set()
    if user_id is not None:
        result = await db.execute(
            select(ReferenceUpvote.reference_id).where(
                ReferenceUpvote.reference_id.in_(reference_ids),
                ReferenceUpvote.user_id == user_id,
            )
        )
        upvoted = set(result.scalars().all())

    return counts, upvoted


async def get_graph_edges(db: AsyncSession, limit: int) -> list[tuple[Book, Book]]:
    """Up to ``limit`` edges as (source book, referenced book) pairs."""
    source = aliased(Book)
    target = aliased(Book)
    result = await db.execute(
        select(source, target)
        .select_from(BookReference)
        .join(source, source.id == BookReference.source_book_id)
        .join(target, target.id == BookReference.referenced_book_id)
        .order_by(BookReference.id)
        .limit(limit)
    )
    return [(s, t) for s, t in result.all()]
