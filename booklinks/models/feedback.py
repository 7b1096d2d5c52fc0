"""User feedback model."""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booklinks.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from booklinks.models.user import User


class FeedbackType(str, enum.Enum):
    """Category chosen by the submitter."""

    BUG = "bug"
    FEATURE = "feature"
    GENERAL = "general"


class FeedbackStatus(str, enum.Enum):
    """Triage status, changed by administrators only."""

    NEW = "new"
    READ = "read"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class Feedback(Base, TimestampMixin):
    """Feedback message, optionally tied to a user."""

    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type: Mapped[FeedbackType] = mapped_column(
        Enum(FeedbackType), default=FeedbackType.GENERAL, nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    page_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[FeedbackStatus] = mapped_column(
        Enum(FeedbackStatus), default=FeedbackStatus.NEW, nullable=False, index=True
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    user: Mapped["User | None"] = relationship("User", lazy="joined")

    __table_args__ = (Index("ix_feedback_status_type", "status", "type"),)

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, type={self.type}, status={self.status})>"
