"""
Indexing Pipeline

Load documents, split them into chunks, embed the chunks, then build and
persist the index.
"""

from __future__ import annotations

import logging
import os
import time
from typing import List, Optional, Union

from .documents.loader import load_documents
from .embeddings.chunker import chunk_document
from .embeddings.embedder import EmbeddingProvider
from .embeddings.index import build_index, index_stats, save_index
from .embeddings.models import Chunk, DocumentIndex, IndexOptions

logger = logging.getLogger("indexer.pipeline")


async def run_indexing(
    documents_dir: Union[str, os.PathLike],
    output_path: Union[str, os.PathLike],
    provider: EmbeddingProvider,
    chunk_size: int = 500,
    overlap: int = 50,
) -> Optional[DocumentIndex]:
    """
    Run a full indexing pass and save the result to `output_path`.

    Returns the built index, or None when there was nothing to index.
    """
    started = time.monotonic()

    # 1. Load
    documents = load_documents(documents_dir)
    if not documents:
        logger.warning("No documents to process in %s", documents_dir)
        return None

    # 2. Chunk
    chunks: List[Chunk] = []
    for doc in documents:
        doc_chunks = chunk_document(doc.content, doc.filename, chunk_size, overlap)
        chunks.extend(doc_chunks)
        logger.info("%s: %d chunk(s)", doc.filename, len(doc_chunks))

    logger.info(
        "Total chunks created: %d (chunk_size=%d, overlap=%d)",
        len(chunks),
        chunk_size,
        overlap,
    )

    # 3. Embed
    logger.info("Generating embeddings with %s", provider.model_name)
    embeddings = await provider.embed_batch([c.content for c in chunks])

    # 4. Build & save
    index = build_index(
        chunks,
        embeddings,
        IndexOptions(
            model=provider.model_name,
            embedding_dimension=provider.dimension,
            chunk_size=chunk_size,
            overlap=overlap,
        ),
    )
    save_index(index, output_path)

    stats = index_stats(index)
    logger.info(
        "Indexing complete in %.2fs: documents=%d, chunks=%d, "
        "avg_chunk_length=%d, dimension=%d, files=%s",
        time.monotonic() - started,
        stats.total_documents,
        stats.total_chunks,
        stats.avg_chunk_length,
        stats.embedding_dimension,
        ", ".join(stats.unique_files),
    )

    return index
