"""Upvotes and comments attached to reference edges."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booklinks.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from booklinks.models.book import BookReference
    from booklinks.models.user import User


class ReferenceUpvote(Base, TimestampMixin):
    """One user's upvote on one reference."""

    __tablename__ = "reference_upvotes"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    reference_id: Mapped[int] = mapped_column(
        ForeignKey("book_references.id", ondelete="CASCADE"), index=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="upvotes")
    reference: Mapped["BookReference"] = relationship("BookReference", back_populates="upvotes")

    __table_args__ = (
        UniqueConstraint("user_id", "reference_id", name="uq_reference_upvote_user"),
    )

    def __repr__(self) -> str:
        return f"<ReferenceUpvote(user={self.user_id}, reference={self.reference_id})>"


class ReferenceComment(Base, TimestampMixin):
    """Free-text comment on a reference."""

    __tablename__ = "reference_comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    reference_id: Mapped[int] = mapped_column(
        ForeignKey("book_references.id", ondelete="CASCADE"), index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="comments", lazy="joined")
    reference: Mapped["BookReference"] = relationship("BookReference", back_populates="comments")

    def __repr__(self) -> str:
        return f"<ReferenceComment(id={self.id}, reference={self.reference_id})>"
