"""Reference discovery trigger."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.db import get_db
from booklinks.models.schemas import DiscoveryRequest, DiscoveryResponse, ReferenceRead
from booklinks.services.discovery import (
    DiscoveryError,
    SourceBookNotFoundError,
    discover_references,
)
from booklinks.utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@router.post("", response_model=DiscoveryResponse)
async def discover(
    data: DiscoveryRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DiscoveryResponse | JSONResponse:
    """Discover references for a book given as ``{bookId}`` or ``{bookTitle}``."""
    if data.book_id is None and not (data.book_title and data.book_title.strip()):
        return _failure(400, "bookId or bookTitle is required")

    try:
        result = await discover_references(db, book_id=data.book_id, book_title=data.book_title)
    except SourceBookNotFoundError as e:
        return _failure(404, str(e))
    except DiscoveryError as e:
        logger.error(f"Discovery failed: {e}")
        return _failure(500, str(e))

    return DiscoveryResponse(
        success=True,
        references=[ReferenceRead.model_validate(ref) for ref in result.references],
        count=result.count,
        message=None if result.count else "No new references found",
    )
