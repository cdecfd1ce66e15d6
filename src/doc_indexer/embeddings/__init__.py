"""
Embeddings Package

Text chunking, embedding providers, the document index and similarity search.
"""

from .chunker import chunk_text, chunk_document, find_word_boundary
from .embedder import Embedder, EmbeddingProvider
from .index import build_index, save_index, load_index, index_stats
from .search import cosine_similarity, search_index, search_by_text
from .models import (
    Chunk,
    ChunkSource,
    DocumentIndex,
    EmbeddingFailure,
    EmbeddingOutcome,
    EmbeddingSuccess,
    IndexedRecord,
    IndexMetadata,
    IndexOptions,
    IndexStats,
    SearchResult,
    SearchStats,
)

__all__ = [
    "chunk_text",
    "chunk_document",
    "find_word_boundary",
    "Embedder",
    "EmbeddingProvider",
    "build_index",
    "save_index",
    "load_index",
    "index_stats",
    "cosine_similarity",
    "search_index",
    "search_by_text",
    "Chunk",
    "ChunkSource",
    "DocumentIndex",
    "EmbeddingFailure",
    "EmbeddingOutcome",
    "EmbeddingSuccess",
    "IndexedRecord",
    "IndexMetadata",
    "IndexOptions",
    "IndexStats",
    "SearchResult",
    "SearchStats",
]
