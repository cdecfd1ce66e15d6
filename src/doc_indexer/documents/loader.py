"""
Plain-text document loader.

Reads `.txt` and `.md` files from a directory and hands `(filename, content)`
pairs to the chunker. Binary formats are not parsed here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union
import os

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import DocumentLoadError

logger = logging.getLogger("indexer.loader")

SUPPORTED_EXTENSIONS = (".txt", ".md")


class SourceDocument(BaseModel):
    filename: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, extra="forbid")


def load_documents(directory: Union[str, os.PathLike]) -> List[SourceDocument]:
    """
    Load every supported document from `directory`, in filename order.

    Empty and unreadable files are skipped and logged.

    Raises
    ------
    DocumentLoadError
        If the directory does not exist.
    """
    root = Path(directory)
    if not root.is_dir():
        raise DocumentLoadError(f"Directory not found: {root}")

    files = sorted(
        p for p in root.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )

    if not files:
        logger.warning(
            "No supported documents found in %s (supported: %s)",
            root,
            ", ".join(SUPPORTED_EXTENSIONS),
        )
        return []

    logger.info("Found %d document(s) to process", len(files))

    documents: List[SourceDocument] = []

    for path in files:
        try:
            content = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error loading %s: %s", path.name, exc)
            continue

        if not content:
            logger.warning("Skipped %s (empty file)", path.name)
            continue

        documents.append(SourceDocument(filename=path.name, content=content))
        logger.info("Loaded %s (%d characters)", path.name, len(content))

    return documents
