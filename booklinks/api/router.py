"""Main API router."""

from fastapi import APIRouter

from booklinks.api.auth import router as auth_router
from booklinks.api.books import router as books_router
from booklinks.api.discovery import router as discovery_router
from booklinks.api.feedback import router as feedback_router
from booklinks.api.graph import router as graph_router
from booklinks.api.lists import router as lists_router
from booklinks.api.references import router as references_router
from booklinks.api.stats import router as stats_router
from booklinks.api.user import router as user_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(books_router, prefix="/books", tags=["books"])
api_router.include_router(discovery_router, prefix="/discover", tags=["discovery"])
api_router.include_router(feedback_router, prefix="/feedback", tags=["feedback"])
api_router.include_router(graph_router, prefix="/graph", tags=["graph"])
api_router.include_router(lists_router, prefix="/lists", tags=["lists"])
api_router.include_router(references_router, tags=["references"])
api_router.include_router(stats_router, prefix="/stats", tags=["stats"])
api_router.include_router(user_router, prefix="/user", tags=["user"])
