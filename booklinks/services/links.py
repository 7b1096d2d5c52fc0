"""Outbound purchase and library search links for a book."""

from urllib.parse import quote

AFFILIATE_TAGS = {
    "US": "booklinks-20",
    "CA": "booklinks-ca-20",
    "GB": "booklinks-uk-20",
    "DE": "booklinks-de-20",
    "FR": "booklinks-fr-20",
    "JP": "booklinks-jp-20",
    "AU": "booklinks-au-20",
    "IN": "booklinks-in-20",
}

AMAZON_DOMAINS = {
    "US": "amazon.com",
    "CA": "amazon.ca",
    "GB": "amazon.co.uk",
    "DE": "amazon.de",
    "FR": "amazon.fr",
    "JP": "amazon.co.jp",
    "AU": "amazon.com.au",
    "IN": "amazon.in",
}

DEFAULT_COUNTRY = "US"


def _search_query(title: str, author: str) -> str:
    # Same escaping as JavaScript's encodeURIComponent
    return quote(f"{title} {author}", safe="!~*'()")


def amazon_link(title: str, author: str, country: str | None = None) -> str:
    """Amazon search link with the affiliate tag of the visitor's store."""
    country = (country or DEFAULT_COUNTRY).upper()
    if country not in AMAZON_DOMAINS:
        country = DEFAULT_COUNTRY
    domain = AMAZON_DOMAINS[country]
    tag = AFFILIATE_TAGS[country]
    return f"https://www.{domain}/s?k={_search_query(title, author)}&tag={tag}"


def worldcat_link(title: str, author: str) -> str:
    return f"https://www.worldcat.org/search?q={_search_query(title, author)}"


def open_library_link(title: str, author: str) -> str:
    return f"https://openlibrary.org/search?q={_search_query(title, author)}"


def library_of_congress_link(title: str, author: str) -> str:
    return f"https://catalog.loc.gov/vwebv/search?searchArg={_search_query(title, author)}"


def book_links(title: str, author: str, country: str | None = None) -> dict[str, str]:
    """All outbound links for a book, keyed as in the book detail payload."""
    return {
        "amazon": amazon_link(title, author, country),
        "worldcat": worldcat_link(title, author),
        "open_library": open_library_link(title, author),
        "library_of_congress": library_of_congress_link(title, author),
    }
