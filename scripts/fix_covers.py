#!/usr/bin/env python3
"""Backfill cover images from Google Books.

Books without a cover, or still showing the stock Unsplash fallback, get the
thumbnail of the best-matching Google Books volume. Safe to re-run: books
that already have a real cover are skipped.

Usage:
    python scripts/fix_covers.py
    python scripts/fix_covers.py --dry-run
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, or_, select

from booklinks.constants import COVER_BACKFILL_DELAY, FALLBACK_COVER_HOST
from booklinks.db import async_session_maker, close_db, init_db
from booklinks.models.book import Book
from booklinks.services.metadata.google_books import google_books_service
from booklinks.utils.http_client import close_all_clients

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def fix_covers(dry_run: bool = False) -> dict[str, int]:
    """Look up a cover for every book that needs one."""
    stats = {"updated": 0, "skipped": 0, "failed": 0}

    async with async_session_maker() as db:
        result = await db.execute(
            select(Book)
            .where(or_(Book.cover_url.is_(None), Book.cover_url.contains(FALLBACK_COVER_HOST)))
            .order_by(Book.title)
        )
        books = result.scalars().all()
        total = (await db.execute(select(func.count(Book.id)))).scalar_one()
        stats["skipped"] = total - len(books)

        logger.info(f"Found {total} books, {len(books)} need a cover\n")

        for book in books:
            logger.info(f'Fixing: "{book.title}" by {book.author}')
            logger.info(f"  Current: {'Unsplash fallback' if book.cover_url else 'NO COVER'}")

            cover = await google_books_service.find_cover(book.title, book.author)
            if cover:
                if not dry_run:
                    book.cover_url = cover
                    await db.commit()
                logger.info(f"  Updated: {cover}")
                stats["updated"] += 1
            else:
                logger.info("  No cover found")
                stats["failed"] += 1

            await asyncio.sleep(COVER_BACKFILL_DELAY)

    return stats


async def main() -> None:
    parser = argparse.ArgumentParser(description="Backfill book covers from Google Books")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without changes")
    args = parser.parse_args()

    logger.info("=" * 60)
    logger.info("Cover backfill" + (" (dry run)" if args.dry_run else ""))
    logger.info("=" * 60)

    await init_db()
    try:
        stats = await fix_covers(dry_run=args.dry_run)
    finally:
        await close_all_clients()
        await close_db()

    logger.info("")
    logger.info("=" * 60)
    logger.info(f"Updated: {stats['updated']}, skipped: {stats['skipped']}, failed: {stats['failed']}")
    logger.info("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
