"""
Similarity Search

Exact, brute-force cosine search over an in-memory DocumentIndex.

Ranking
-------
1. Score every record by cosine similarity (0 when either vector is zero).
2. Sort by score descending, ties broken by ascending record id.
3. Keep the first `top_k` records as the candidate set.
4. Keep candidates scoring at least `threshold`. A threshold of 0 keeps
   every candidate, negative scores included.

Top-K is applied before the threshold: the threshold only trims an already
ranked short list, so the two knobs can be tuned independently.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np

from .embedder import EmbeddingProvider
from .models import DocumentIndex, SearchResult, SearchStats
from ..core.errors import DimensionMismatchError, InvalidParametersError

logger = logging.getLogger("indexer.search")

DEFAULT_TOP_K = 5
DEFAULT_THRESHOLD = 0.3


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors, in [-1, 1].

    Returns exactly 0.0 when either vector has zero magnitude.

    Raises
    ------
    DimensionMismatchError
        If the vectors differ in length.
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(
            f"Vectors must have the same length ({len(vec_a)} != {len(vec_b)})"
        )

    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)

    magnitude = float(np.linalg.norm(a) * np.linalg.norm(b))
    if magnitude == 0.0:
        return 0.0

    return float(np.clip(np.dot(a, b) / magnitude, -1.0, 1.0))


def _score_all(index: DocumentIndex, query: np.ndarray) -> np.ndarray:
    matrix = np.asarray(
        [record.embedding for record in index.documents],
        dtype=np.float64,
    )

    dots = matrix @ query
    magnitudes = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)

    scores = np.zeros(len(index.documents), dtype=np.float64)
    np.divide(dots, magnitudes, out=scores, where=magnitudes != 0)

    return np.clip(scores, -1.0, 1.0)


def search_index(
    index: DocumentIndex,
    query_embedding: Sequence[float],
    top_k: int = DEFAULT_TOP_K,
    threshold: float = DEFAULT_THRESHOLD,
) -> Tuple[List[SearchResult], SearchStats]:
    """
    Rank every record of the index against a query embedding.

    Parameters
    ----------
    index : DocumentIndex
        Loaded or freshly built index. It is never mutated.

    query_embedding : Sequence[float]
        Query vector of length index.metadata.embedding_dimension.

    top_k : int
        Size of the candidate set.

    threshold : float
        Minimum score a candidate needs to be returned. 0 disables
        filtering, so every candidate is returned whatever its score.

    Returns
    -------
    Tuple[List[SearchResult], SearchStats]
        Results in descending score order, plus diagnostic counters.

    Raises
    ------
    InvalidParametersError
        If top_k is smaller than 1.

    DimensionMismatchError
        If the query length disagrees with the index dimension.
    """
    if top_k < 1:
        raise InvalidParametersError(f"top_k must be at least 1, got {top_k}")

    if not index.documents:
        return [], SearchStats(
            total_scored=0,
            candidates=0,
            filtered_out=0,
            passed=0,
            threshold=threshold,
            max_score=0.0,
            min_passed_score=None,
        )

    expected = index.metadata.embedding_dimension
    if len(query_embedding) != expected:
        raise DimensionMismatchError(
            f"Query embedding has {len(query_embedding)} dimensions, "
            f"index expects {expected}"
        )

    query = np.asarray(query_embedding, dtype=np.float64)
    scores = _score_all(index, query)

    ids = np.asarray([record.id for record in index.documents])
    # lexsort uses the last key as the primary one.
    order = np.lexsort((ids, -scores))

    candidates = order[:top_k]
    if threshold == 0:
        passed = [int(i) for i in candidates]
    else:
        passed = [int(i) for i in candidates if scores[i] >= threshold]

    results = [
        SearchResult(
            content=index.documents[i].content,
            source=index.documents[i].source,
            score=float(scores[i]),
        )
        for i in passed
    ]

    stats = SearchStats(
        total_scored=len(scores),
        candidates=len(candidates),
        filtered_out=len(candidates) - len(passed),
        passed=len(passed),
        threshold=threshold,
        max_score=float(scores[order[0]]),
        min_passed_score=results[-1].score if results else None,
    )

    logger.debug(
        "Search scored=%d candidates=%d passed=%d threshold=%.3f max=%.4f",
        stats.total_scored,
        stats.candidates,
        stats.passed,
        threshold,
        stats.max_score,
    )

    return results, stats


async def search_by_text(
    index: DocumentIndex,
    query: str,
    provider: EmbeddingProvider,
    top_k: int = DEFAULT_TOP_K,
    threshold: float = DEFAULT_THRESHOLD,
) -> Tuple[List[SearchResult], SearchStats]:
    """
    Embed a query string with the given provider and search the index.
    """
    query_embedding = await provider.embed(query)
    return search_index(index, query_embedding, top_k=top_k, threshold=threshold)
