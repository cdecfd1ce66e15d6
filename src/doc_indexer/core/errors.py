"""
Error Taxonomy and Global Error Handling

This module defines the exception hierarchy shared by the chunker, the index
builder, the search routine and the embedding provider, together with the
FastAPI exception handlers that translate them into HTTP responses.

Design Goals
------------
- Every failure of the retrieval core is a distinct, identifiable type
- Never leak internal exception details to clients
- Always return deterministic, machine-readable error responses
- Log full stack traces internally for unexpected failures
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("indexer.errors")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class IndexerError(RuntimeError):
    """Base error for all document indexer failures."""


class InvalidParametersError(IndexerError, ValueError):
    """Raised for malformed chunking or search configuration."""


class DimensionMismatchError(IndexerError, ValueError):
    """Raised when lengths of embeddings, chunks or queries disagree."""


class IndexIntegrityError(IndexerError):
    """Raised when declared index metadata disagrees with record contents."""


class CorruptIndexError(IndexerError):
    """Raised when a persisted index artifact cannot be trusted."""


class IndexNotFoundError(IndexerError):
    """Raised when a persisted index artifact does not exist."""


class DocumentLoadError(IndexerError):
    """Raised when the document source cannot be read."""


class EmbeddingError(IndexerError):
    """Raised when embedding generation fails."""


# Status codes for errors that are safe to report to clients.
_STATUS_BY_ERROR = (
    (InvalidParametersError, 422, "invalid_parameters"),
    (DimensionMismatchError, 422, "dimension_mismatch"),
    (IndexNotFoundError, 503, "index_unavailable"),
    (CorruptIndexError, 503, "index_unavailable"),
    (EmbeddingError, 502, "embedding_failed"),
)


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def indexer_error_handler(
    request: Request,
    exc: IndexerError,
) -> JSONResponse:
    """
    Translate known indexer errors into client-facing responses.

    Errors without an explicit mapping fall through to the generic
    500 handler.
    """
    for error_type, status_code, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            logger.warning(
                "Request %s %s failed with %s: %s",
                request.method,
                request.url.path,
                type(exc).__name__,
                exc,
            )
            payload: Dict[str, Any] = {
                "error": code,
                "detail": str(exc),
            }
            return JSONResponse(status_code=status_code, content=payload)

    return await unhandled_exception_handler(request, exc)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
