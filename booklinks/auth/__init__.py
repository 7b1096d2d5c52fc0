"""Authentication module."""

from booklinks.auth.dependencies import get_admin_user, get_current_user, get_optional_user

__all__ = [
    "get_admin_user",
    "get_current_user",
    "get_optional_user",
]
