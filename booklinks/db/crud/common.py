"""Helpers shared by the CRUD modules."""

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(db: AsyncSession, model):
    """Dialect-specific INSERT, which supports ``on_conflict_do_nothing``.

    PostgreSQL in production, SQLite in tests.
    """
    if db.bind.dialect.name == "postgresql":
        return pg_insert(model)
    return sqlite_insert(model)
