"""Reading list models."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booklinks.models.base import Base, TimestampMixin
from booklinks.models.book import Book

if TYPE_CHECKING:
    from booklinks.models.user import User


class ReadingList(Base, TimestampMixin):
    """Named, ordered collection of books owned by one user."""

    __tablename__ = "reading_lists"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(String(300), unique=True, index=True)
    is_public: Mapped[bool] = mapped_column(default=False, index=True)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="reading_lists", lazy="joined")
    items: Mapped[list["ReadingListItem"]] = relationship(
        "ReadingListItem",
        back_populates="reading_list",
        cascade="all, delete-orphan",
        order_by="ReadingListItem.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<ReadingList(id={self.id}, slug={self.slug})>"


class ReadingListItem(Base, TimestampMixin):
    """A book placed at a position within a reading list."""

    __tablename__ = "reading_list_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    reading_list_id: Mapped[int] = mapped_column(
        ForeignKey("reading_lists.id", ondelete="CASCADE"), index=True
    )
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    reading_list: Mapped[ReadingList] = relationship("ReadingList", back_populates="items")
    book: Mapped[Book] = relationship("Book", lazy="joined")

    __table_args__ = (
        UniqueConstraint("reading_list_id", "book_id", name="uq_reading_list_item_book"),
    )

    def __repr__(self) -> str:
        return f"<ReadingListItem(list={self.reading_list_id}, book={self.book_id}, pos={self.position})>"
