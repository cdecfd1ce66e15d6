"""
Embedding Provider

This module defines the embedding-provider contract consumed by the indexing
pipeline and the text search, and a concrete client for the OpenAI
embeddings API (or any compatible provider). The client is responsible for:

- Efficient batching of text inputs
- Network and transport error isolation
- Strict response validation against the declared dimensionality
- Typed per-text outcomes, so one failed chunk never sinks a whole index

Providers are constructed explicitly and passed in; nothing here holds
process-wide state.
"""

from __future__ import annotations

from typing import List, Sequence, Optional, Protocol, runtime_checkable
import logging
import httpx

from .models import EmbeddingFailure, EmbeddingOutcome, EmbeddingSuccess
from ..config import settings
from ..core.errors import EmbeddingError

logger = logging.getLogger("indexer.embedder")


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract every embedding provider fulfils.

    `model_name` and `dimension` are declared up front and recorded in the
    index metadata; every vector produced must have `dimension` entries.
    """

    model_name: str
    dimension: int

    async def embed(self, text: str) -> List[float]:
        ...

    async def embed_batch(self, texts: Sequence[str]) -> List[EmbeddingOutcome]:
        ...


class Embedder:
    """
    Asynchronous embedding client for an OpenAI-compatible endpoint.

    This class performs no caching and is safe to reuse across requests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        dimension: Optional[int] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        batch_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize an Embedder.

        Parameters
        ----------
        api_key : Optional[str]
            Override for the API key. Defaults to settings.openai_api_key.

        model : Optional[str]
            Override for the embedding model. Defaults to settings.embedding_model.

        dimension : Optional[int]
            Declared vector length. Defaults to settings.embedding_dimension.

        base_url : Optional[str]
            Embeddings endpoint URL. Defaults to settings.embedding_base_url.

        timeout : Optional[float]
            HTTP timeout for each request.

        batch_size : Optional[int]
            Maximum number of texts per request.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport, mainly for tests.
        """
        self.api_key = api_key or settings.openai_api_key.get_secret_value()
        self.model_name = model or settings.embedding_model
        self.dimension = dimension if dimension is not None else settings.embedding_dimension
        self.base_url = base_url or settings.embedding_base_url
        self.timeout = timeout if timeout is not None else settings.embedding_timeout
        self.batch_size = batch_size if batch_size is not None else settings.embedding_batch_size
        self._transport = transport

        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.dimension <= 0:
            raise ValueError("dimension must be positive")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> List[float]:
        """
        Generate the embedding of a single text, typically a search query.

        Raises
        ------
        EmbeddingError
            If the text is empty or the provider fails.
        """
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text.")

        [outcome] = await self.embed_batch([text])

        if isinstance(outcome, EmbeddingFailure):
            raise EmbeddingError(f"Embedding generation failed: {outcome.reason}")

        return outcome.vector

    async def embed_batch(self, texts: Sequence[str]) -> List[EmbeddingOutcome]:
        """
        Generate embeddings for a sequence of texts.

        Returns
        -------
        List[EmbeddingOutcome]
            One outcome per input text, in input order. A failed request
            marks every text of its batch as failed; nothing is raised for
            per-text failures.
        """
        if not texts:
            return []

        outcomes: List[Optional[EmbeddingOutcome]] = [None] * len(texts)
        pending: List[int] = []

        for i, text in enumerate(texts):
            if not text or not text.strip():
                outcomes[i] = EmbeddingFailure(reason="empty text")
            else:
                pending.append(i)

        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            for start in range(0, len(pending), self.batch_size):
                positions = pending[start : start + self.batch_size]
                batch = [texts[i] for i in positions]

                try:
                    vectors = await self._request_batch(client, batch, headers)
                except EmbeddingError as exc:
                    logger.error(
                        "Embedding batch failed: batch size=%d, error=%s",
                        len(batch),
                        str(exc),
                    )
                    for i in positions:
                        outcomes[i] = EmbeddingFailure(reason=str(exc))
                    continue

                for i, vector in zip(positions, vectors):
                    outcomes[i] = self._check_vector(i, vector)

        failed = sum(1 for o in outcomes if isinstance(o, EmbeddingFailure))
        if failed:
            logger.warning("%d of %d text(s) failed to embed", failed, len(texts))

        return outcomes  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request_batch(
        self,
        client: httpx.AsyncClient,
        batch: List[str],
        headers: dict,
    ) -> List[List[float]]:
        payload = {
            "model": self.model_name,
            "input": batch,
            "dimensions": self.dimension,
        }

        try:
            response = await client.post(
                self.base_url,
                json=payload,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise EmbeddingError(
                f"Embedding request failed: {type(exc).__name__}"
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise EmbeddingError("Embedding response is not valid JSON.") from exc

        embeddings = self._extract_embeddings(data)

        if len(embeddings) != len(batch):
            raise EmbeddingError(
                f"Embedding response has {len(embeddings)} vector(s) "
                f"for {len(batch)} input(s)."
            )

        return embeddings

    def _check_vector(self, position: int, vector: List[float]) -> EmbeddingOutcome:
        if len(vector) != self.dimension:
            logger.error(
                "Embedding at position %d has %d dimensions, expected %d",
                position,
                len(vector),
                self.dimension,
            )
            return EmbeddingFailure(
                reason=f"expected {self.dimension} dimensions, got {len(vector)}"
            )
        return EmbeddingSuccess(vector=vector)

    @staticmethod
    def _extract_embeddings(data: dict) -> List[List[float]]:
        """
        Parse and validate embedding output format.

        OpenAI returns:
            { "data": [ {"index": 0, "embedding": [...]}, ... ] }

        Records are ordered by their `index` field when present.

        Raises
        ------
        EmbeddingError
            If the API returns unexpected structure.
        """
        if not isinstance(data, dict) or "data" not in data:
            raise EmbeddingError("Embedding response missing 'data' field.")

        records = data["data"]
        if not isinstance(records, list):
            raise EmbeddingError("'data' field must be a list.")

        if all(isinstance(r, dict) and isinstance(r.get("index"), int) for r in records):
            records = sorted(records, key=lambda r: r["index"])

        embeddings: List[List[float]] = []

        for index, record in enumerate(records):
            if not isinstance(record, dict) or "embedding" not in record:
                raise EmbeddingError(
                    f"Malformed embedding record at index {index}: {record!r}"
                )

            emb = record["embedding"]
            if not isinstance(emb, list) or not emb or not all(
                isinstance(x, (float, int)) and not isinstance(x, bool) for x in emb
            ):
                raise EmbeddingError(
                    f"Invalid embedding vector at index {index}: must be float list."
                )

            embeddings.append([float(x) for x in emb])

        return embeddings
