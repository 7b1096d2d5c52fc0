"""Pydantic schemas for API validation and serialization."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booklinks.constants import MAX_COMMENT_LENGTH, MAX_FEEDBACK_LENGTH

# Re-export enums from models (avoid duplication)
from booklinks.models.book import ReferenceSource as ReferenceSourceEnum
from booklinks.models.feedback import FeedbackStatus as FeedbackStatusEnum
from booklinks.models.feedback import FeedbackType as FeedbackTypeEnum


# User schemas
class UserRead(BaseModel):
    """User read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    avatar_url: str | None = None
    display_name: str | None = None
    bio: str | None = None
    is_admin: bool = False
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Profile update schema."""

    display_name: str | None = Field(None, max_length=100)
    bio: str | None = None


# Book schemas
class BookBase(BaseModel):
    """Base book schema."""

    title: str = Field(min_length=1, max_length=500)
    author: str | None = None
    description: str | None = None
    cover_url: str | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class BookCreate(BookBase):
    """Book creation schema (typically from a Google Books search hit)."""

    pass


class BookRead(BaseModel):
    """Book read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    title: str
    author: str
    description: str | None = None
    cover_url: str | None = None
    references_discovered: bool = False
    references_discovered_at: datetime | None = None
    created_at: datetime


class BookSearchResult(BaseModel):
    """Local catalogue search hit."""

    id: int
    slug: str
    title: str
    author: str
    description: str | None = None
    cover_url: str
    reference_count: int = 0


class GoogleBookResult(BaseModel):
    """Simplified Google Books volume."""

    google_id: str | None = None
    slug: str
    title: str
    author: str
    description: str | None = None
    cover_url: str | None = None


# Reference schemas
class ReferenceCreate(BookBase):
    """User-added reference: the referenced book plus optional context."""

    context: str | None = None


class ReferenceRead(BaseModel):
    """Reference edge read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    source_book_id: int
    referenced_book_id: int
    context: str | None = None
    source: ReferenceSourceEnum
    source_url: str | None = None
    source_verified: bool = False
    created_at: datetime


class ReferenceCreated(BaseModel):
    """Result of adding a reference by hand."""

    created: bool
    reference: ReferenceRead | None = None
    referenced_book: BookRead


class ReferenceItem(BaseModel):
    """One entry of a book's "references" or "referenced by" list.

    ``slug``/``title``/... describe the book at the other end of the edge.
    """

    reference_id: int
    slug: str
    title: str
    author: str
    description: str | None = None
    cover_url: str
    context: str | None = None
    source: ReferenceSourceEnum
    upvote_count: int = 0
    user_has_upvoted: bool = False


class BookLinks(BaseModel):
    """Outbound purchase / library links."""

    amazon: str
    worldcat: str
    open_library: str
    library_of_congress: str


class BookDetail(BaseModel):
    """Book with its edges read in both directions."""

    id: int
    slug: str
    title: str
    author: str
    description: str | None = None
    cover_url: str
    references_discovered: bool
    needs_discovery: bool
    references: list[ReferenceItem] = []
    referenced_by: list[ReferenceItem] = []
    links: BookLinks


# Discovery schemas
class DiscoveryRequest(BaseModel):
    """Discovery trigger body; accepts camelCase keys from the web client."""

    model_config = ConfigDict(populate_by_name=True)

    book_id: int | None = Field(None, alias="bookId")
    book_title: str | None = Field(None, alias="bookTitle")


class DiscoveryResponse(BaseModel):
    """Discovery trigger result."""

    success: bool
    references: list[ReferenceRead] = []
    count: int = 0
    message: str | None = None


# Graph schemas
class GraphNode(BaseModel):
    """Graph node with its connection counter."""

    id: int
    slug: str
    title: str
    author: str
    cover_url: str | None = None
    connections: int = 0


class GraphLink(BaseModel):
    """Directed graph link."""

    source: int
    target: int


class GraphRead(BaseModel):
    """Node/link arrays handed to the graph renderer."""

    nodes: list[GraphNode] = []
    links: list[GraphLink] = []


# Reading list schemas
class ReadingListCreate(BaseModel):
    """Reading list creation schema."""

    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    is_public: bool = False
    book_id: int | None = None  # Optionally add a first book


class ReadingListUpdate(BaseModel):
    """Reading list update schema."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    is_public: bool | None = None


class ReadingListItemCreate(BaseModel):
    """Add a book to a list."""

    book_id: int
    notes: str | None = None


class ReadingListItemRead(BaseModel):
    """Reading list item read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int
    position: int
    notes: str | None = None
    book: BookRead


class ReadingListSummary(BaseModel):
    """Reading list without items."""

    id: int
    name: str
    description: str | None = None
    slug: str
    is_public: bool
    user_id: int
    owner_name: str | None = None
    item_count: int = 0
    contains_book: bool | None = None
    created_at: datetime


class ReadingListRead(ReadingListSummary):
    """Reading list with items ordered by position."""

    items: list[ReadingListItemRead] = []


# Community schemas
class UpvoteStatus(BaseModel):
    """Upvote state of a reference for the caller."""

    upvoted: bool
    count: int


class CommentCreate(BaseModel):
    """Comment creation schema."""

    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content must not be blank")
        return v


class CommentRead(BaseModel):
    """Comment read schema."""

    id: int
    reference_id: int
    user_id: int
    display_name: str
    content: str
    created_at: datetime


# Feedback schemas
class FeedbackCreate(BaseModel):
    """Feedback submission schema."""

    type: FeedbackTypeEnum = FeedbackTypeEnum.GENERAL
    message: str = Field(min_length=1, max_length=MAX_FEEDBACK_LENGTH)
    email: str | None = None
    page_url: str | None = None

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message must not be blank")
        return v


class FeedbackUpdate(BaseModel):
    """Admin triage update."""

    status: FeedbackStatusEnum | None = None
    admin_notes: str | None = None


class FeedbackRead(BaseModel):
    """Feedback read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: FeedbackTypeEnum
    message: str
    email: str | None = None
    page_url: str | None = None
    status: FeedbackStatusEnum
    admin_notes: str | None = None
    user_id: int | None = None
    created_at: datetime
    updated_at: datetime
