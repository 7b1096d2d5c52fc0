#!/usr/bin/env python3
"""Seed the catalogue with popular books and discover their references.

Each title is looked up on Google Books and added if missing, then reference
discovery runs for it. Books already discovered are skipped unless --force
is given, so the script is safe to re-run.

Usage:
    python scripts/seed_references.py
    python scripts/seed_references.py --force "Deep Work" "Zero to One"
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from booklinks.constants import SEED_DISCOVERY_DELAY
from booklinks.db import async_session_maker, close_db, init_db
from booklinks.db.crud import create_book, get_book_by_slug
from booklinks.services.discovery import DiscoveryError, ReferenceDiscovery
from booklinks.services.metadata.google_books import google_books_service
from booklinks.utils.http_client import close_all_clients
from booklinks.utils.slugs import slugify

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

POPULAR_BOOKS = [
    "Sapiens: A Brief History of Humankind",
    "Atomic Habits",
    "Thinking, Fast and Slow",
    "The Power of Habit",
    "Deep Work",
    "Range: Why Generalists Triumph in a Specialized World",
    "Grit: The Power of Passion and Perseverance",
    "The Lean Startup",
    "Zero to One",
    "Good to Great",
]


async def seed_book(discovery: ReferenceDiscovery, title: str, force: bool = False) -> int:
    """Make sure ``title`` exists, then discover its references. Returns new edge count."""
    async with async_session_maker() as db:
        book = await get_book_by_slug(db, slugify(title))
        if book is None:
            results = await google_books_service.search_books(title, limit=1)
            match = results[0] if results else {}
            book, _ = await create_book(
                db,
                title=title,
                author=match.get("author"),
                description=match.get("description"),
                cover_url=match.get("cover_url"),
            )
            await db.commit()
            logger.info(f"  Added book: {book.title} by {book.author}")
        elif book.references_discovered and not force:
            logger.info("  Already discovered, skipping")
            return 0

        result = await discovery.discover(db, book_id=book.id)
        await db.commit()
        return result.count


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed books and discover their references")
    parser.add_argument("titles", nargs="*", help="Titles to seed (default: built-in list)")
    parser.add_argument("--force", action="store_true", help="Re-run discovery for discovered books")
    args = parser.parse_args()

    titles = args.titles or POPULAR_BOOKS
    await init_db()
    discovery = ReferenceDiscovery()

    total = 0
    try:
        for index, title in enumerate(titles):
            logger.info(f"Processing references for: {title}")
            try:
                count = await seed_book(discovery, title, force=args.force)
                logger.info(f"  Added {count} references for {title}")
                total += count
            except DiscoveryError as e:
                logger.error(f"  Error processing {title}: {e}")

            if index < len(titles) - 1:
                await asyncio.sleep(SEED_DISCOVERY_DELAY)
    finally:
        await close_all_clients()
        await close_db()

    logger.info(f"Finished seeding references ({total} new)")


if __name__ == "__main__":
    asyncio.run(main())
