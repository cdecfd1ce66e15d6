import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from doc_indexer.main import create_app
from doc_indexer.api.dependencies import get_document_index, get_embedder
from doc_indexer.core.errors import CorruptIndexError, EmbeddingError, IndexNotFoundError
from doc_indexer.embeddings.embedder import Embedder


@pytest.fixture
def mock_embedder():
    mock = AsyncMock(spec=Embedder)
    mock.embed.return_value = [1.0, 0.0]
    return mock


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app, three_record_index, mock_embedder):
    app.dependency_overrides[get_document_index] = lambda: three_record_index
    app.dependency_overrides[get_embedder] = lambda: mock_embedder

    with TestClient(app) as c:
        yield c

    app.dependency_overrides = {}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_index_stats(client):
    resp = client.get("/index/stats")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_chunks"] == 3
    assert data["unique_files"] == ["doc.txt"]
    assert data["embedding_dimension"] == 2


def test_search(client, mock_embedder):
    resp = client.post("/search/", json={"query": "east", "top_k": 2, "threshold": 0.5})

    assert resp.status_code == 200
    data = resp.json()
    assert [r["content"] for r in data["results"]] == ["east", "mostly east"]
    assert data["results"][1]["source"] == {"filename": "doc.txt", "chunkIndex": 2}
    assert data["stats"]["passed"] == 2
    assert data["stats"]["candidates"] == 2
    mock_embedder.embed.assert_awaited_once_with("east")


def test_search_uses_configured_defaults(client):
    resp = client.post("/search/", json={"query": "east"})

    assert resp.status_code == 200
    stats = resp.json()["stats"]
    assert stats["threshold"] == 0.3
    assert stats["candidates"] == 3


def test_search_rejects_empty_query(client):
    resp = client.post("/search/", json={"query": ""})
    assert resp.status_code == 422


def test_query_dimension_mismatch_is_422(client, mock_embedder):
    mock_embedder.embed.return_value = [1.0, 0.0, 0.0]

    resp = client.post("/search/", json={"query": "east"})

    assert resp.status_code == 422
    assert resp.json()["error"] == "dimension_mismatch"


def test_embedding_failure_is_502(client, mock_embedder):
    mock_embedder.embed.side_effect = EmbeddingError("provider down")

    resp = client.post("/search/", json={"query": "east"})

    assert resp.status_code == 502
    assert resp.json()["error"] == "embedding_failed"


@pytest.mark.parametrize("error", [IndexNotFoundError("gone"), CorruptIndexError("bad")])
def test_unavailable_index_is_503(app, mock_embedder, error):
    def _broken_index():
        raise error

    app.dependency_overrides[get_document_index] = _broken_index
    app.dependency_overrides[get_embedder] = lambda: mock_embedder

    with TestClient(app) as c:
        resp = c.get("/index/stats")

    assert resp.status_code == 503
    assert resp.json()["error"] == "index_unavailable"
