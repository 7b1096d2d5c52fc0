"""Reference discovery.

Finds books referenced by (or mentioning) a given book using an OpenAI chat
model and Google Books full-text search, then stores the edges.

Usage:
    from booklinks.services.discovery import discover_references

    result = await discover_references(db, book_id=42)
    print(result.count)
"""

from booklinks.services.discovery.candidates import (
    Candidate,
    deduplicate_candidates,
    mentions_to_candidates,
)
from booklinks.services.discovery.llm import ReferenceSuggester, parse_suggestions
from booklinks.services.discovery.pipeline import (
    DiscoveryError,
    DiscoveryResult,
    ReferenceDiscovery,
    SourceBookNotFoundError,
    discover_references,
)

__all__ = [
    # Candidates
    "Candidate",
    "deduplicate_candidates",
    "mentions_to_candidates",
    # Suggestions
    "ReferenceSuggester",
    "parse_suggestions",
    # Pipeline
    "DiscoveryError",
    "DiscoveryResult",
    "ReferenceDiscovery",
    "SourceBookNotFoundError",
    "discover_references",
]
