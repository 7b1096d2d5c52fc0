"""Reference candidates and their deduplication."""

from dataclasses import dataclass
from typing import Any

from booklinks.constants import (
    DISCOVERY_SNIPPET_LENGTH,
    GOOGLE_BOOKS_VOLUME_URL,
    UNKNOWN_AUTHOR,
)
from booklinks.models.book import ReferenceSource


@dataclass
class Candidate:
    """A book that may be linked to the source book."""

    title: str
    author: str
    source: ReferenceSource
    context: str | None = None
    source_url: str | None = None
    google_id: str | None = None

    @property
    def verified(self) -> bool:
        """Corroborated by a Google Books text hit rather than suggested."""
        return self.source == ReferenceSource.GOOGLE_BOOKS

    @property
    def key(self) -> tuple[str, str]:
        return self.title.lower(), self.author.lower()


def mentions_to_candidates(source_title: str, volumes: list[dict[str, Any]]) -> list[Candidate]:
    """Turn Google Books mention hits into verified candidates.

    Volumes whose title equals or contains the source title are the source
    book itself (or an edition/companion of it) and are skipped.
    """
    source_lower = source_title.lower()
    candidates = []

    for volume in volumes:
        title = volume["title"]
        if source_lower in title.lower():
            continue

        snippet = volume.get("snippet")
        if snippet:
            context = f"Mentioned in text: {snippet[:DISCOVERY_SNIPPET_LENGTH]}..."
        else:
            context = "Found via Google Books text search"

        google_id = volume.get("google_id")
        candidates.append(
            Candidate(
                title=title,
                author=volume.get("author") or UNKNOWN_AUTHOR,
                source=ReferenceSource.GOOGLE_BOOKS,
                context=context,
                source_url=f"{GOOGLE_BOOKS_VOLUME_URL}?id={google_id}" if google_id else None,
                google_id=google_id,
            )
        )

    return candidates


def deduplicate_candidates(
    verified: list[Candidate], suggested: list[Candidate]
) -> list[Candidate]:
    """Merge both candidate sets, one per lowercase (title, author).

    Verified candidates win on collision; suggestions only fill keys that
    are still free. First occurrence wins within each set.
    """
    merged: dict[tuple[str, str], Candidate] = {}
    for candidate in [*verified, *suggested]:
        merged.setdefault(candidate.key, candidate)
    return list(merged.values())
