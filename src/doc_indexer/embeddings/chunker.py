"""
Text Chunker

Splits raw document text into overlapping, word-aligned spans.

Key Properties
--------------
- Whitespace is normalized before scanning (runs collapse to one space)
- Chunk edges snap to word boundaries, so no word is severed unless a single
  word is longer than the chunk size
- Chunk start offsets strictly increase, so the scan always terminates
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import Chunk, ChunkSource
from ..core.errors import InvalidParametersError

logger = logging.getLogger("indexer.chunker")

DEFAULT_CHUNK_SIZE = 500
DEFAULT_OVERLAP = 50


def normalize_whitespace(text: str) -> str:
    """Collapse every run of whitespace to a single space and trim."""
    return " ".join(text.split())


def _validate_parameters(chunk_size: int, overlap: int) -> None:
    if not isinstance(chunk_size, int) or isinstance(chunk_size, bool) or chunk_size <= 0:
        raise InvalidParametersError(
            f"chunk_size must be a positive integer, got {chunk_size!r}"
        )
    if not isinstance(overlap, int) or isinstance(overlap, bool) or overlap < 0:
        raise InvalidParametersError(
            f"overlap must be a non-negative integer, got {overlap!r}"
        )
    if overlap >= chunk_size:
        raise InvalidParametersError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def find_word_boundary(
    text: str,
    position: int,
    direction: str = "backward",
    floor: int = 0,
) -> int:
    """
    Find the nearest word boundary (space) around `position`.

    Backward search returns the index of the nearest space at or before
    `position` but strictly after `floor`; when there is none, `position`
    itself is returned. Forward search returns the index just past the next
    space at or after `position`, or the text length when there is none.
    A position at or past the end of the text returns the text length;
    negative positions are treated as 0.
    """
    if position >= len(text):
        return len(text)

    position = max(position, 0)

    if direction == "backward":
        pos = position
        while pos > floor and text[pos] != " ":
            pos -= 1
        return pos if pos > floor else position

    if direction == "forward":
        pos = position
        while pos < len(text) and text[pos] != " ":
            pos += 1
        return pos + 1 if pos < len(text) else len(text)

    raise ValueError(f"Unknown search direction: {direction!r}")


def chunk_text(
    text: Optional[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> List[str]:
    """
    Split text into overlapping chunks of at most `chunk_size` characters.

    Parameters
    ----------
    text : Optional[str]
        Raw input text. Empty, None or whitespace-only input yields [].

    chunk_size : int
        Maximum chunk length in characters.

    overlap : int
        Approximate number of characters shared by consecutive chunks.

    Returns
    -------
    List[str]
        Chunks in document order.

    Raises
    ------
    InvalidParametersError
        If chunk_size is not positive or overlap is not in [0, chunk_size).
    """
    _validate_parameters(chunk_size, overlap)

    if not text:
        return []

    normalized = normalize_whitespace(text)
    length = len(normalized)

    if length == 0:
        return []

    if length <= chunk_size:
        return [normalized]

    chunks: List[str] = []
    start = 0

    while start < length:
        end = start + chunk_size

        if end < length:
            end = find_word_boundary(normalized, end, "backward", floor=start)
        else:
            end = length

        piece = normalized[start:end].strip()
        if piece:
            chunks.append(piece)

        # Next chunk starts on the word following (end - overlap).
        next_start = find_word_boundary(normalized, end - overlap, "forward")
        if next_start <= start:
            next_start = end

        start = next_start

    return chunks


def chunk_document(
    text: Optional[str],
    filename: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> List[Chunk]:
    """
    Chunk a document and attach `{filename, chunk_index}` provenance.
    """
    pieces = chunk_text(text, chunk_size, overlap)

    chunks = [
        Chunk(
            content=content,
            source=ChunkSource(filename=filename, chunk_index=i),
        )
        for i, content in enumerate(pieces)
    ]

    logger.debug(
        "Chunked %s: %d chunk(s), chunk_size=%d, overlap=%d",
        filename,
        len(chunks),
        chunk_size,
        overlap,
    )

    return chunks
