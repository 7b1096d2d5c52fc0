"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booklinks.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from booklinks.models.community import ReferenceComment, ReferenceUpvote
    from booklinks.models.reading_list import ReadingList


class User(Base, TimestampMixin):
    """User model for authentication, reading lists and community actions."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    # Public profile
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Feedback triage
    is_admin: Mapped[bool] = mapped_column(default=False)

    # OAuth provider ID
    github_id: Mapped[int | None] = mapped_column(unique=True, index=True, nullable=True)

    # Relationships
    # lazy="select" so lists/votes are only loaded when explicitly queried
    reading_lists: Mapped[list["ReadingList"]] = relationship(
        "ReadingList",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    upvotes: Mapped[list["ReferenceUpvote"]] = relationship(
        "ReferenceUpvote",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    comments: Mapped[list["ReferenceComment"]] = relationship(
        "ReferenceComment",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )

    @property
    def public_name(self) -> str:
        """Name shown next to comments and lists."""
        return self.display_name or self.username

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
