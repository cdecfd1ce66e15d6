"""
Embedding Data Models

This module defines the canonical data models of the retrieval core:

- Chunk / ChunkSource      : a span of normalized text and its provenance
- IndexedRecord            : a chunk bound to its embedding vector
- IndexMetadata / DocumentIndex : the complete persisted retrieval corpus
- SearchResult / SearchStats   : ephemeral per-query projections
- EmbeddingSuccess / EmbeddingFailure : typed per-text embedding outcomes

Persisted models use camelCase aliases so the JSON artifact keeps the
`embeddingDimension`, `totalChunks`, `chunkIndex` field names. All models are
frozen: a built index is an immutable snapshot that concurrent searches can
share safely.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


_PERSISTED = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,            # Make instances immutable once created
    extra="forbid",         # Reject unknown fields in loaded artifacts
)


# ---------------------------------------------------------------------
# Chunks
# ---------------------------------------------------------------------

class ChunkSource(BaseModel):
    """
    Provenance of a chunk within its source document.
    """

    filename: str = Field(
        ...,
        min_length=1,
        description="Name of the document the chunk was extracted from.",
    )

    chunk_index: int = Field(
        ...,
        ge=0,
        description="Zero-based position within the document's chunk sequence.",
    )

    model_config = _PERSISTED


class Chunk(BaseModel):
    """
    A contiguous span of whitespace-normalized text from one document.
    """

    content: str = Field(..., min_length=1)
    source: ChunkSource

    model_config = _PERSISTED


# ---------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------

class IndexedRecord(BaseModel):
    """
    A chunk bound to its embedding vector.

    `id` is dense and zero-based, assigned in acceptance order. It is not
    necessarily equal to `source.chunk_index`.
    """

    id: int = Field(..., ge=0)
    content: str = Field(..., min_length=1)
    source: ChunkSource
    embedding: List[float] = Field(..., min_length=1)

    model_config = _PERSISTED


class IndexMetadata(BaseModel):
    created: datetime
    model: str = Field(..., min_length=1)
    embedding_dimension: int = Field(..., ge=1)
    total_chunks: int = Field(..., ge=0)
    chunk_size: int = Field(..., ge=1)
    overlap: int = Field(..., ge=0)

    model_config = _PERSISTED


class DocumentIndex(BaseModel):
    """
    The complete retrieval corpus.

    Invariants
    ----------
    - metadata.total_chunks == len(documents)
    - every embedding has length metadata.embedding_dimension
    - documents[i].id == i
    """

    metadata: IndexMetadata
    documents: List[IndexedRecord] = Field(default_factory=list)

    model_config = _PERSISTED


class IndexOptions(BaseModel):
    """
    Options for building an index.

    `model` and `embedding_dimension` are the embedding provider's declared
    contract; `chunk_size` and `overlap` record how the chunks were produced.
    """

    model: str = Field(..., min_length=1)
    embedding_dimension: int = Field(..., ge=1)
    chunk_size: int = Field(default=500, ge=1)
    overlap: int = Field(default=50, ge=0)

    model_config = _PERSISTED


class IndexStats(BaseModel):
    """
    Summary statistics of a built or loaded index.
    """

    total_documents: int = Field(..., ge=0)
    total_chunks: int = Field(..., ge=0)
    unique_files: List[str] = Field(default_factory=list)
    total_content_length: int = Field(..., ge=0)
    avg_chunk_length: int = Field(..., ge=0)
    model: str
    embedding_dimension: int = Field(..., ge=1)
    created: datetime

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------

class SearchResult(BaseModel):
    """
    Individual search match. Never persisted.
    """

    content: str
    source: ChunkSource
    score: float = Field(..., ge=-1.0, le=1.0)

    model_config = ConfigDict(frozen=True, extra="forbid")


class SearchStats(BaseModel):
    """
    Diagnostic counters for one search call. They never influence ranking.
    """

    total_scored: int = Field(..., ge=0)
    candidates: int = Field(..., ge=0)
    filtered_out: int = Field(..., ge=0)
    passed: int = Field(..., ge=0)
    threshold: float
    max_score: float
    min_passed_score: Optional[float] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------
# Embedding outcomes
# ---------------------------------------------------------------------

class EmbeddingSuccess(BaseModel):
    vector: List[float] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")


class EmbeddingFailure(BaseModel):
    reason: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")


EmbeddingOutcome = Union[EmbeddingSuccess, EmbeddingFailure]
