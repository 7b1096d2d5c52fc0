"""CRUD operations module."""

from booklinks.db.crud.books import (
    create_book,
    delete_reference,
    get_book,
    get_book_by_slug,
    get_book_edges,
    get_graph_edges,
    get_reference,
    get_upvote_counts,
    insert_reference,
    mark_references_discovered,
    reference_exists,
    search_books,
)
from booklinks.db.crud.community import (
    count_upvotes,
    create_comment,
    delete_comment,
    get_comment,
    get_comments,
    has_upvoted,
    toggle_upvote,
)
from booklinks.db.crud.feedback import (
    create_feedback,
    get_feedback,
    list_feedback,
    update_feedback,
)
from booklinks.db.crud.lists import (
    add_item,
    create_list,
    delete_list,
    get_item_counts,
    get_list,
    get_list_by_slug,
    get_lists_containing,
    get_public_lists,
    get_user_lists,
    remove_item,
    update_list,
)

__all__ = [
    # Books & references
    "create_book",
    "delete_reference",
    "get_book",
    "get_book_by_slug",
    "get_book_edges",
    "get_graph_edges",
    "get_reference",
    "get_upvote_counts",
    "insert_reference",
    "mark_references_discovered",
    "reference_exists",
    "search_books",
    # Community
    "count_upvotes",
    "create_comment",
    "delete_comment",
    "get_comment",
    "get_comments",
    "has_upvoted",
    "toggle_upvote",
    # Feedback
    "create_feedback",
    "get_feedback",
    "list_feedback",
    "update_feedback",
    # Reading lists
    "add_item",
    "create_list",
    "delete_list",
    "get_item_counts",
    "get_list",
    "get_list_by_slug",
    "get_lists_containing",
    "get_public_lists",
    "get_user_lists",
    "remove_item",
    "update_list",
]
