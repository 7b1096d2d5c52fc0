"""Slug helpers shared by books and reading lists."""

import re
import time

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def slugify(title: str) -> str:
    """URL-safe slug: lowercase, non-alphanumeric runs to ``-``, edges trimmed.

    >>> slugify("Harry Potter & the Philosopher's Stone")
    'harry-potter-the-philosopher-s-stone'
    """
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def to_base36(value: int) -> str:
    """Render a non-negative integer in base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def reading_list_slug(name: str, timestamp_ms: int | None = None) -> str:
    """Slug for a reading list: the name's slug plus a base-36 millisecond stamp.

    Names are not unique across users, the stamp keeps slugs distinct.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{slugify(name)}-{to_base36(timestamp_ms)}"
