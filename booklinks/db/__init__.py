"""Database module."""

from booklinks.db.database import (
    async_session_maker,
    close_db,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "async_session_maker",
    "close_db",
    "engine",
    "get_db",
    "init_db",
]
