"""Book and reference (edge) models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booklinks.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from booklinks.models.community import ReferenceComment, ReferenceUpvote


class ReferenceSource(str, enum.Enum):
    """Provenance of a reference edge."""

    USER = "user"  # Added manually by a user
    AI = "ai"  # Suggested by the language model
    GOOGLE_BOOKS = "google_books"  # Corroborated by a Google Books text search hit


class Book(Base, TimestampMixin):
    """A book, shared by all users and addressed publicly by its slug."""

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)
    slug: Mapped[str] = mapped_column(String(500), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Discovery bookkeeping
    references_discovered: Mapped[bool] = mapped_column(default=False, index=True)
    references_discovered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    added_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    references: Mapped[list["BookReference"]] = relationship(
        "BookReference",
        foreign_keys="BookReference.source_book_id",
        back_populates="source_book",
        lazy="select",
    )
    referenced_by: Mapped[list["BookReference"]] = relationship(
        "BookReference",
        foreign_keys="BookReference.referenced_book_id",
        back_populates="referenced_book",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, slug={self.slug})>"


class BookReference(Base):
    """Directed edge: ``source_book`` references ``referenced_book``."""

    __tablename__ = "book_references"

    id: Mapped[int] = mapped_column(primary_key=True)
    source_book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"), index=True
    )
    referenced_book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"), index=True
    )

    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Provenance
    source: Mapped[ReferenceSource] = mapped_column(
        Enum(ReferenceSource), default=ReferenceSource.USER, nullable=False
    )
    source_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    source_verified: Mapped[bool] = mapped_column(default=False)
    verification_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    added_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, nullable=False
    )

    # Relationships
    source_book: Mapped[Book] = relationship(
        "Book", foreign_keys=[source_book_id], back_populates="references", lazy="joined"
    )
    referenced_book: Mapped[Book] = relationship(
        "Book", foreign_keys=[referenced_book_id], back_populates="referenced_by", lazy="joined"
    )
    upvotes: Mapped[list["ReferenceUpvote"]] = relationship(
        "ReferenceUpvote", back_populates="reference", cascade="all, delete-orphan", lazy="select"
    )
    comments: Mapped[list["ReferenceComment"]] = relationship(
        "ReferenceComment", back_populates="reference", cascade="all, delete-orphan", lazy="select"
    )

    __table_args__ = (
        UniqueConstraint(
            "source_book_id", "referenced_book_id", name="uq_book_reference_pair"
        ),
        Index("ix_book_reference_source_created", "source_book_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookReference(id={self.id}, {self.source_book_id} -> "
            f"{self.referenced_book_id}, source={self.source})>"
        )
