"""Reference graph endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booklinks.db import get_db
from booklinks.models.schemas import GraphRead
from booklinks.services.graph import load_reference_graph

router = APIRouter()


@router.get("", response_model=GraphRead)
async def get_graph(db: Annotated[AsyncSession, Depends(get_db)]) -> GraphRead:
    """Nodes (with connection counts) and links for the explore view."""
    graph = await load_reference_graph(db)
    return GraphRead.model_validate(graph)
