"""
Document Index

This module builds, persists and loads the retrieval corpus: chunks bound to
their embedding vectors with provenance.

Key Properties
--------------
- Dense, zero-based record ids regardless of skipped embeddings
- Declared dimensionality enforced at build time
- Crash-safe persistence (write to a temporary file, then replace)
- Strong validation of loaded artifacts
- Built indexes are immutable snapshots; rebuilding means a new index

The persisted artifact is one JSON document loaded wholesale into memory.
This is sized for corpora that fit in memory; there is no streaming load.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from .models import (
    Chunk,
    DocumentIndex,
    EmbeddingFailure,
    EmbeddingOutcome,
    IndexMetadata,
    IndexOptions,
    IndexStats,
    IndexedRecord,
)
from ..core.errors import (
    CorruptIndexError,
    DimensionMismatchError,
    IndexIntegrityError,
    IndexNotFoundError,
)

logger = logging.getLogger("indexer.index")

PathLike = Union[str, os.PathLike]


# ---------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------

def build_index(
    chunks: Sequence[Chunk],
    embeddings: Sequence[EmbeddingOutcome],
    options: IndexOptions,
    created: Optional[datetime] = None,
) -> DocumentIndex:
    """
    Bind chunks to their embeddings.

    Parameters
    ----------
    chunks : Sequence[Chunk]
        Chunks in the order they were embedded.

    embeddings : Sequence[EmbeddingOutcome]
        One outcome per chunk, position for position.

    options : IndexOptions
        Provider-declared model and dimension plus the chunking parameters.

    created : Optional[datetime]
        Build timestamp. Defaults to the current UTC time.

    Returns
    -------
    DocumentIndex
        Index containing one record per successful embedding.

    Raises
    ------
    DimensionMismatchError
        If the number of chunks and embeddings differ.

    IndexIntegrityError
        If an embedding's length disagrees with the declared dimension.
    """
    if len(chunks) != len(embeddings):
        raise DimensionMismatchError(
            f"Mismatch between chunks ({len(chunks)}) and embeddings ({len(embeddings)})"
        )

    records: List[IndexedRecord] = []
    skipped: List[str] = []

    for chunk, outcome in zip(chunks, embeddings):
        if isinstance(outcome, EmbeddingFailure):
            skipped.append(
                f"{chunk.source.filename}#{chunk.source.chunk_index}: {outcome.reason}"
            )
            continue

        if len(outcome.vector) != options.embedding_dimension:
            raise IndexIntegrityError(
                f"Embedding for {chunk.source.filename}#{chunk.source.chunk_index} "
                f"has {len(outcome.vector)} dimensions, declared "
                f"{options.embedding_dimension} for model {options.model}"
            )

        records.append(
            IndexedRecord(
                id=len(records),
                content=chunk.content,
                source=chunk.source,
                embedding=outcome.vector,
            )
        )

    if skipped:
        logger.warning(
            "Skipped %d chunk(s) with failed embeddings: %s",
            len(skipped),
            "; ".join(skipped),
        )

    metadata = IndexMetadata(
        created=created or datetime.now(timezone.utc),
        model=options.model,
        embedding_dimension=options.embedding_dimension,
        total_chunks=len(records),
        chunk_size=options.chunk_size,
        overlap=options.overlap,
    )

    return DocumentIndex(metadata=metadata, documents=records)


def check_integrity(index: DocumentIndex) -> None:
    """
    Verify the index invariants.

    Raises
    ------
    IndexIntegrityError
        If the record count, dimensionality or ids disagree with metadata.
    """
    meta = index.metadata

    if meta.total_chunks != len(index.documents):
        raise IndexIntegrityError(
            f"metadata.totalChunks is {meta.total_chunks} but the index holds "
            f"{len(index.documents)} record(s)"
        )

    for position, record in enumerate(index.documents):
        if record.id != position:
            raise IndexIntegrityError(
                f"Record at position {position} has id {record.id}; ids must be dense"
            )
        if len(record.embedding) != meta.embedding_dimension:
            raise IndexIntegrityError(
                f"Record {record.id} has {len(record.embedding)} dimensions, "
                f"declared {meta.embedding_dimension}"
            )


# ---------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------

def save_index(index: DocumentIndex, path: PathLike) -> Path:
    """
    Persist the index to a single JSON file atomically.

    Missing parent directories are created. Returns the written path.
    """
    output_path = Path(path)
    output_dir = output_path.parent

    if not output_dir.exists():
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created output directory: %s", output_dir)

    content = index.model_dump_json(by_alias=True, indent=2)

    fd, tmp_name = tempfile.mkstemp(
        dir=str(output_dir),
        prefix=f".{output_path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    size_mb = output_path.stat().st_size / (1024 * 1024)
    logger.info("Index saved to: %s (%.2f MB)", output_path, size_mb)

    return output_path


def load_index(path: PathLike) -> DocumentIndex:
    """
    Load and validate a persisted index.

    Raises
    ------
    IndexNotFoundError
        If the file does not exist.

    CorruptIndexError
        If the file is not valid JSON, lacks `metadata` or `documents`,
        fails schema validation or violates the index invariants.
    """
    index_path = Path(path)

    if not index_path.is_file():
        raise IndexNotFoundError(f"Index file not found: {index_path}")

    try:
        with index_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CorruptIndexError(
            f"Failed to read index {index_path}: {type(exc).__name__}"
        ) from exc

    if not isinstance(data, dict) or "metadata" not in data or "documents" not in data:
        raise CorruptIndexError(
            "Invalid index format: missing metadata or documents"
        )

    try:
        index = DocumentIndex.model_validate(data)
    except ValidationError as exc:
        raise CorruptIndexError(
            f"Invalid index format: {exc.error_count()} validation error(s)"
        ) from exc

    try:
        check_integrity(index)
    except IndexIntegrityError as exc:
        raise CorruptIndexError(f"Inconsistent index: {exc}") from exc

    logger.info(
        "Loaded index from %s: model=%s, chunks=%d, created=%s",
        index_path,
        index.metadata.model,
        index.metadata.total_chunks,
        index.metadata.created.isoformat(),
    )

    return index


# ---------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------

def index_stats(index: DocumentIndex) -> IndexStats:
    """
    Return index statistics for diagnostics.
    """
    files: List[str] = []
    seen = set()
    total_length = 0

    for record in index.documents:
        if record.source.filename not in seen:
            seen.add(record.source.filename)
            files.append(record.source.filename)
        total_length += len(record.content)

    count = len(index.documents)

    return IndexStats(
        total_documents=len(files),
        total_chunks=count,
        unique_files=files,
        total_content_length=total_length,
        avg_chunk_length=round(total_length / count) if count else 0,
        model=index.metadata.model,
        embedding_dimension=index.metadata.embedding_dimension,
        created=index.metadata.created,
    )
