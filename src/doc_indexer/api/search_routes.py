"""
Search Routes

Semantic search over the loaded document index. The query text is embedded
with the configured provider and matched against every indexed chunk.
"""

from fastapi import APIRouter, Depends, status
from typing import Annotated

from .models import SearchRequest, SearchResponse
from .dependencies import get_document_index, get_embedder
from ..config import settings
from ..embeddings.embedder import Embedder
from ..embeddings.models import DocumentIndex
from ..embeddings.search import search_by_text

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "/",
    response_model=SearchResponse,
    summary="Vector-based semantic search",
    status_code=status.HTTP_200_OK,
)
async def search(
    req: SearchRequest,
    index: Annotated[DocumentIndex, Depends(get_document_index)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
) -> SearchResponse:
    """
    Perform a vector-based semantic search over indexed chunks.

    Parameters
    ----------
    req : SearchRequest
        Contains:
        - query: Search query string
        - top_k: Size of the candidate set (default from settings)
        - threshold: Minimum score (default from settings)

    Returns
    -------
    SearchResponse
        Ranked matches and the search diagnostics.
    """
    # Indexer errors are translated by the registered exception handlers.
    results, stats = await search_by_text(
        index,
        req.query,
        embedder,
        top_k=req.top_k if req.top_k is not None else settings.search_top_k,
        threshold=(
            req.threshold if req.threshold is not None else settings.search_threshold
        ),
    )

    return SearchResponse(results=results, stats=stats)
