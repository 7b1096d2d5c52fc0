"""SQLAlchemy models."""

from booklinks.models.base import Base
from booklinks.models.book import Book, BookReference, ReferenceSource
from booklinks.models.community import ReferenceComment, ReferenceUpvote
from booklinks.models.feedback import Feedback, FeedbackStatus, FeedbackType
from booklinks.models.reading_list import ReadingList, ReadingListItem
from booklinks.models.user import User

__all__ = [
    "Base",
    "User",
    "Book",
    "BookReference",
    "ReferenceSource",
    "ReadingList",
    "ReadingListItem",
    "ReferenceUpvote",
    "ReferenceComment",
    "Feedback",
    "FeedbackType",
    "FeedbackStatus",
]
