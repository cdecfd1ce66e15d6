"""
API Models

Request/response models for the search service.
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from ..embeddings.models import SearchResult, SearchStats


class SearchRequest(BaseModel):
    """
    Text search request. Unset knobs fall back to the configured defaults.
    """
    query: str = Field(..., min_length=1)
    top_k: Optional[int] = Field(default=None, ge=1, le=100)
    threshold: Optional[float] = Field(default=None, ge=-1.0, le=1.0)

    model_config = ConfigDict(extra="forbid")


class SearchResponse(BaseModel):
    results: List[SearchResult]
    stats: SearchStats

    model_config = ConfigDict(extra="forbid")
