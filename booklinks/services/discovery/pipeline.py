"""Reference discovery pipeline.

Given a source book, collect candidate references from two independent
sources, deduplicate them, make sure each candidate exists as a book, insert
the new edges and mark the source book as discovered:

    suggestions (LLM) ─┐
                       ├─> deduplicate -> resolve books -> insert edges -> flag
    mentions (Google) ─┘

The two lookups fail soft. Re-running is safe: books are found again by slug
and already stored edges are skipped.
"""

import asyncio
from dataclasses import dataclass, field

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.constants import DISCOVERY_DESCRIPTION_LENGTH
from booklinks.db.crud.books import (
    create_book,
    get_book,
    get_book_by_slug,
    insert_reference,
    mark_references_discovered,
    reference_exists,
)
from booklinks.models.book import Book, BookReference
from booklinks.services.discovery.candidates import (
    Candidate,
    deduplicate_candidates,
    mentions_to_candidates,
)
from booklinks.services.discovery.llm import ReferenceSuggester
from booklinks.services.metadata.google_books import GoogleBooksService, google_books_service
from booklinks.utils.cache import invalidate_stats_cache
from booklinks.utils.logging import LogContext, get_logger
from booklinks.utils.slugs import slugify

logger = get_logger(__name__)


class DiscoveryError(Exception):
    """Edges could not be stored; the book stays undiscovered."""


class SourceBookNotFoundError(DiscoveryError):
    """The book to discover references for does not exist."""


@dataclass
class DiscoveryResult:
    """Newly created edges for one discovery run."""

    book: Book
    references: list[BookReference] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.references)


@dataclass
class _PendingEdge:
    source_book_id: int
    referenced_book_id: int
    candidate: Candidate


class ReferenceDiscovery:
    """Runs discovery for one book at a time."""

    def __init__(
        self,
        books: GoogleBooksService | None = None,
        suggester: ReferenceSuggester | None = None,
    ) -> None:
        self.books = books or google_books_service
        self.suggester = suggester or ReferenceSuggester()

    async def resolve_source(
        self, db: AsyncSession, book_id: int | None = None, book_title: str | None = None
    ) -> Book:
        """Find the source book by id, or by the slug of its title."""
        if book_id is not None:
            book = await get_book(db, book_id)
        elif book_title:
            book = await get_book_by_slug(db, slugify(book_title))
        else:
            raise ValueError("bookId or bookTitle is required")

        if book is None:
            raise SourceBookNotFoundError("Source book not found")
        return book

    async def _mention_candidates(self, title: str, author: str | None) -> list[Candidate]:
        try:
            volumes = await self.books.search_mentions(title, author)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error searching Google Books mentions for {title!r}: {e}")
            return []
        return mentions_to_candidates(title, volumes)

    async def collect_candidates(self, book: Book) -> list[Candidate]:
        """Run both lookups concurrently and merge their candidates."""
        log = LogContext(logger, book=book.slug)

        suggested, verified = await asyncio.gather(
            self.suggester.suggest(book.title, book.author),
            self._mention_candidates(book.title, book.author),
        )
        log.info(f"AI suggested {len(suggested)}, Google Books found {len(verified)} mentions")

        candidates = deduplicate_candidates(verified, suggested)
        log.info(f"{len(candidates)} unique candidates")
        return candidates

    async def resolve_candidate(self, db: AsyncSession, candidate: Candidate) -> Book:
        """Find the candidate's book by slug, or create it with looked-up metadata."""
        existing = await get_book_by_slug(db, slugify(candidate.title))
        if existing is not None:
            return existing

        cover_url, description = await self.books.find_metadata(
            candidate.title, candidate.author, candidate.google_id
        )
        book, _ = await create_book(
            db,
            title=candidate.title,
            author=candidate.author,
            description=description[:DISCOVERY_DESCRIPTION_LENGTH] if description else None,
            cover_url=cover_url,
        )
        return book

    async def pending_edge(
        self, db: AsyncSession, source: Book, candidate: Candidate
    ) -> _PendingEdge | None:
        """Resolve a candidate and orient its edge. None for self or known edges."""
        book = await self.resolve_candidate(db, candidate)
        if book.id == source.id:
            return None

        # Google Books hits are books that mention the source book
        if candidate.verified:
            edge = _PendingEdge(book.id, source.id, candidate)
        else:
            edge = _PendingEdge(source.id, book.id, candidate)

        if await reference_exists(db, edge.source_book_id, edge.referenced_book_id):
            return None
        return edge

    async def discover(
        self, db: AsyncSession, book_id: int | None = None, book_title: str | None = None
    ) -> DiscoveryResult:
        """Discover and store references for a book.

        Raises:
            ValueError: neither ``book_id`` nor ``book_title`` given
            SourceBookNotFoundError: the source book does not exist
            DiscoveryError: storing edges failed (transaction rolled back)
        """
        source = await self.resolve_source(db, book_id, book_title)
        log = LogContext(logger, book=source.slug)
        log.info(f"Discovering references for: {source.title} by {source.author}")

        candidates = await self.collect_candidates(source)

        pending: list[_PendingEdge] = []
        for candidate in candidates:
            if not slugify(candidate.title):
                log.debug(f"Skipping candidate without slug: {candidate.title!r}")
                continue
            # A savepoint per candidate keeps the transaction usable after a failure
            try:
                async with db.begin_nested():
                    edge = await self.pending_edge(db, source, candidate)
            except Exception:
                log.exception(f"Error processing reference {candidate.title!r}")
                continue

            if edge is None:
                log.debug(f"Skipping self or existing reference: {candidate.title}")
                continue
            pending.append(edge)

        created: list[BookReference] = []
        try:
            for edge in pending:
                reference = await insert_reference(
                    db,
                    source_book_id=edge.source_book_id,
                    referenced_book_id=edge.referenced_book_id,
                    source=edge.candidate.source,
                    context=edge.candidate.context,
                    source_url=edge.candidate.source_url,
                    source_verified=edge.candidate.verified,
                )
                if reference is not None:
                    created.append(reference)

            await mark_references_discovered(db, source)
        except SQLAlchemyError as e:
            log.error(f"Error inserting references: {e}")
            await db.rollback()
            raise DiscoveryError(str(e)) from e

        log.info(f"Stored {len(created)} new references")
        if created:
            await invalidate_stats_cache()
        return DiscoveryResult(book=source, references=created)


async def discover_references(
    db: AsyncSession,
    book_id: int | None = None,
    book_title: str | None = None,
    discovery: ReferenceDiscovery | None = None,
) -> DiscoveryResult:
    """Convenience wrapper around :meth:`ReferenceDiscovery.discover`."""
    discovery = discovery or ReferenceDiscovery()
    return await discovery.discover(db, book_id=book_id, book_title=book_title)
