"""
Index Routes

Read-only diagnostics for the loaded document index.
"""

from fastapi import APIRouter, Depends
from typing import Annotated

from .dependencies import get_document_index
from ..embeddings.index import index_stats
from ..embeddings.models import DocumentIndex, IndexStats

router = APIRouter(prefix="/index", tags=["index"])


@router.get(
    "/stats",
    response_model=IndexStats,
    summary="Get document index statistics",
)
async def get_index_stats(
    index: Annotated[DocumentIndex, Depends(get_document_index)],
) -> IndexStats:
    return index_stats(index)
