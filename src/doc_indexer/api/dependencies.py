from functools import lru_cache
from threading import Lock
from typing import Optional

from ..config import settings
from ..embeddings.embedder import Embedder
from ..embeddings.index import load_index
from ..embeddings.models import DocumentIndex

# Loaded indexes are immutable snapshots, so one instance serves every request.
# A failed load is not cached; the next request retries.
_global_index: Optional[DocumentIndex] = None
_index_lock = Lock()


def get_document_index() -> DocumentIndex:
    global _global_index
    with _index_lock:
        if _global_index is None:
            _global_index = load_index(settings.index_path)
        return _global_index


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()
