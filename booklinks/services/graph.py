"""Book/reference graph assembly.

Two views over the same edge table:

* per book: edges where the book is the source ("references") and edges
  where it is the target ("referenced by")
* global: node/link arrays for the explore graph, where each node carries
  a connection counter used to size it
"""

from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.constants import DEFAULT_COVER_URL, GRAPH_EDGE_LIMIT
from booklinks.db.crud.books import (
    get_book_by_slug,
    get_book_edges,
    get_graph_edges,
    get_upvote_counts,
)
from booklinks.models.book import Book, BookReference
from booklinks.models.user import User
from booklinks.services.links import book_links
from booklinks.utils.logging import get_logger

logger = get_logger(__name__)


def _node(book: Any) -> dict[str, Any]:
    return {
        "id": book.id,
        "slug": book.slug,
        "title": book.title,
        "author": book.author,
        "cover_url": book.cover_url,
        "connections": 0,
    }


def build_reference_graph(edges: Iterable[tuple[Any, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Build node/link arrays from (source book, referenced book) pairs.

    Every edge adds one connection to each of its endpoints, so a pair of
    books referencing each other gives two links and a count of 2 on both.
    Edges with a missing endpoint are skipped.
    """
    nodes: dict[int, dict[str, Any]] = {}
    links: list[dict[str, int]] = []

    for source, target in edges:
        if source is None or target is None:
            continue

        for book in (source, target):
            if book.id not in nodes:
                nodes[book.id] = _node(book)
            nodes[book.id]["connections"] += 1

        links.append({"source": source.id, "target": target.id})

    return {"nodes": list(nodes.values()), "links": links}


async def load_reference_graph(
    db: AsyncSession, limit: int = GRAPH_EDGE_LIMIT
) -> dict[str, list[dict[str, Any]]]:
    """Read up to ``limit`` edges and build the graph. Read errors give an empty graph."""
    try:
        edges = await get_graph_edges(db, limit)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load reference graph: {e}")
        return {"nodes": [], "links": []}
    return build_reference_graph(edges)


def _reference_item(
    reference: BookReference,
    other: Book,
    counts: dict[int, int],
    upvoted: set[int],
) -> dict[str, Any]:
    return {
        "reference_id": reference.id,
        "slug": other.slug,
        "title": other.title,
        "author": other.author,
        "description": other.description,
        "cover_url": other.cover_url or DEFAULT_COVER_URL,
        "context": reference.context,
        "source": reference.source,
        "upvote_count": counts.get(reference.id, 0),
        "user_has_upvoted": reference.id in upvoted,
    }


async def get_book_detail(
    db: AsyncSession,
    slug: str,
    viewer: User | None = None,
    country: str | None = None,
) -> dict[str, Any] | None:
    """Book fields plus its edges in both directions, or None for an unknown slug."""
    book = await get_book_by_slug(db, slug)
    if book is None:
        return None

    outgoing, incoming = await get_book_edges(db, book.id)
    counts, upvoted = await get_upvote_counts(
        db,
        [ref.id for ref in (*outgoing, *incoming)],
        viewer.id if viewer else None,
    )

    references = [_reference_item(ref, ref.referenced_book, counts, upvoted) for ref in outgoing]
    referenced_by = [_reference_item(ref, ref.source_book, counts, upvoted) for ref in incoming]

    return {
        "id": book.id,
        "slug": book.slug,
        "title": book.title,
        "author": book.author,
        "description": book.description,
        "cover_url": book.cover_url or DEFAULT_COVER_URL,
        "references_discovered": book.references_discovered,
        "needs_discovery": not book.references_discovered and not references and not referenced_by,
        "references": references,
        "referenced_by": referenced_by,
        "links": book_links(book.title, book.author, country),
    }
