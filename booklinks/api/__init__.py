"""API routers."""

from booklinks.api.router import api_router

__all__ = ["api_router"]
