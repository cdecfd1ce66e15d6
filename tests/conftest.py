from datetime import datetime, timezone
from typing import Dict, List, Sequence

import pytest

from doc_indexer.embeddings.models import (
    Chunk,
    ChunkSource,
    EmbeddingFailure,
    EmbeddingOutcome,
    EmbeddingSuccess,
    IndexOptions,
)
from doc_indexer.embeddings.index import build_index


class FakeProvider:
    """In-memory embedding provider with canned vectors per text."""

    def __init__(self, vectors: Dict[str, List[float]], dimension: int = 2, model_name: str = "fake-model"):
        self.vectors = vectors
        self.dimension = dimension
        self.model_name = model_name
        self.calls: List[List[str]] = []

    async def embed(self, text: str) -> List[float]:
        return self.vectors[text]

    async def embed_batch(self, texts: Sequence[str]) -> List[EmbeddingOutcome]:
        self.calls.append(list(texts))
        outcomes: List[EmbeddingOutcome] = []
        for text in texts:
            if text in self.vectors:
                outcomes.append(EmbeddingSuccess(vector=self.vectors[text]))
            else:
                outcomes.append(EmbeddingFailure(reason="no vector"))
        return outcomes


def make_chunk(content: str, filename: str = "doc.txt", chunk_index: int = 0) -> Chunk:
    return Chunk(
        content=content,
        source=ChunkSource(filename=filename, chunk_index=chunk_index),
    )


@pytest.fixture
def created_at():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def three_record_index(created_at):
    chunks = [
        make_chunk("east", chunk_index=0),
        make_chunk("north", chunk_index=1),
        make_chunk("mostly east", chunk_index=2),
    ]
    outcomes = [
        EmbeddingSuccess(vector=[1.0, 0.0]),
        EmbeddingSuccess(vector=[0.0, 1.0]),
        EmbeddingSuccess(vector=[0.9, 0.1]),
    ]
    return build_index(
        chunks,
        outcomes,
        IndexOptions(model="fake-model", embedding_dimension=2, chunk_size=10, overlap=3),
        created=created_at,
    )
