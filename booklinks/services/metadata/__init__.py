"""External book metadata providers."""

from booklinks.services.metadata.google_books import GoogleBooksService, google_books_service

__all__ = ["GoogleBooksService", "google_books_service"]
