"""Integration tests for the FastAPI endpoints using TestClient.

The app is assembled from the real router, middleware and services; only
the vector store, the article fetcher and the LLM are replaced.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from src.api.routes import router as api_router
from src.services.answer_service import AnswerService
from src.services.retrieval_service import RetrievalService
from src.utils.errors import GenerationError, StoreError
from tests.conftest import FakeLLMProvider, make_article, make_document


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_test_app(vector_store, article_provider, llm) -> FastAPI:
    """Build a minimal FastAPI app with mocked providers on app.state."""
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)

    retrieval = RetrievalService(vector_store=vector_store, article_provider=article_provider)
    app.state.vector_store = vector_store
    app.state.retrieval_service = retrieval
    app.state.answer_service = AnswerService(retrieval, llm)
    app.state.provider_registry = {"llm": True, "llm_name": llm.get_provider_name()}
    app.state.version = "0.1.0"
    return app


@pytest.fixture
def llm() -> FakeLLMProvider:
    return FakeLLMProvider(["The council approved the transit budget."], chunk_size=8)


@pytest.fixture
def client(mock_vector_store, mock_article_provider, llm) -> TestClient:
    return TestClient(_create_test_app(mock_vector_store, mock_article_provider, llm))


# ---------------------------------------------------------------------------
# /search
# ---------------------------------------------------------------------------


class TestSearch:
    def test_returns_chunks(self, client, mock_vector_store) -> None:
        mock_vector_store.query.return_value = [
            make_document("a", "Budget approved", source="Example", url="https://news.example.com/a")
        ]

        response = client.post("/search", json={"query": "budget"})

        assert response.status_code == 200
        chunks = response.json()["chunks"]
        assert chunks[0]["id"] == "a"
        assert chunks[0]["content"] == "Budget approved"
        assert chunks[0]["metadata"]["url"] == "https://news.example.com/a"
        mock_vector_store.query.assert_awaited_once_with("budget", top_k=5)

    def test_custom_top_k(self, client, mock_vector_store) -> None:
        client.post("/search", json={"query": "budget", "top_k": 2})
        mock_vector_store.query.assert_awaited_once_with("budget", top_k=2)

    def test_empty_query_rejected(self, client) -> None:
        assert client.post("/search", json={"query": ""}).status_code == 422

    def test_store_error_becomes_generic_500(self, client, mock_vector_store) -> None:
        mock_vector_store.query.side_effect = StoreError(
            message="connection refused at 10.0.0.5", provider_name="chromadb"
        )

        response = client.post("/search", json={"query": "budget"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "StoreError"
        assert "10.0.0.5" not in body["detail"]


# ---------------------------------------------------------------------------
# /agent
# ---------------------------------------------------------------------------


class TestAgent:
    def test_streams_plain_text(self, client, mock_vector_store, llm) -> None:
        mock_vector_store.query.return_value = [make_document("a", "The budget passed.")]

        response = client.post("/agent", json={"query": "did the budget pass?"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "The council approved the transit budget."
        assert "The budget passed." in llm.prompts[0]
        mock_vector_store.query.assert_awaited_once_with("did the budget pass?", top_k=7)

    def test_url_query_uses_linked_article(
        self, client, mock_vector_store, mock_article_provider, llm
    ) -> None:
        mock_article_provider.fetch.side_effect = lambda url: make_article(url, content="LINKED BODY")

        response = client.post("/agent", json={"query": "summarize https://example.com/a"})

        assert response.status_code == 200
        assert "LINKED BODY" in llm.prompts[0]
        mock_vector_store.query.assert_not_awaited()

    def test_generation_failure_before_output_is_500(
        self, mock_vector_store, mock_article_provider
    ) -> None:
        failing = FakeLLMProvider([GenerationError(message="down", provider_name="fake-llm")])
        client = TestClient(_create_test_app(mock_vector_store, mock_article_provider, failing))

        response = client.post("/agent", json={"query": "q"})

        assert response.status_code == 500
        assert response.json()["error"] == "GenerationError"


# ---------------------------------------------------------------------------
# /health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_healthy(self, client, mock_vector_store) -> None:
        mock_vector_store.count.return_value = 12

        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["version"] == "0.1.0"
        assert body["corpus"] == {"collection_name": "news_articles", "total_documents": 12}
        assert body["providers"]["vector_store"] is True

    def test_store_down_is_unhealthy(self, client, mock_vector_store) -> None:
        mock_vector_store.count.side_effect = StoreError(message="down")

        body = client.get("/health").json()

        assert body["status"] == "unhealthy"
        assert body["providers"]["vector_store"] is False
        assert body["corpus"] is None
