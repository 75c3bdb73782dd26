"""Shared pytest fixtures for the newsrag test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.article_provider import ArticleContent, IArticleProvider
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import Document

# A paragraph comfortably above the 100-character chunk minimum.
LONG_PARAGRAPH = (
    "The city council approved the new transit budget on Tuesday after a "
    "lengthy debate about bus routes, bike lanes and fare subsidies for students."
)


# ---------------------------------------------------------------------------
# LLM
# ---------------------------------------------------------------------------


class FakeLLMProvider(ILLMProvider):
    """Streams scripted responses; each call consumes the next script entry.

    A script entry that is an exception instance is raised instead.
    """

    def __init__(self, responses: list[Any] | None = None, chunk_size: int = 16) -> None:
        self._responses = list(responses or [])
        self._chunk_size = chunk_size
        self.prompts: list[str] = []
        self.closed = 0

    async def stream(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> AsyncIterator[str]:
        self.prompts.append(prompt)
        response = self._responses.pop(0) if self._responses else ""
        if isinstance(response, BaseException):
            raise response
        try:
            for start in range(0, len(response), self._chunk_size):
                yield response[start : start + self._chunk_size]
        finally:
            self.closed += 1

    def get_provider_name(self) -> str:
        return "fake-llm"

    def is_available(self) -> bool:
        return True


@pytest.fixture
def fake_llm() -> FakeLLMProvider:
    return FakeLLMProvider()


# ---------------------------------------------------------------------------
# Embedding
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MagicMock:
    """Embedding provider returning a constant 8-dim vector."""
    mock = MagicMock(spec=IEmbeddingProvider)
    mock.embed_single = AsyncMock(return_value=[0.1] * 8)
    mock.embed = AsyncMock(return_value=[[0.1] * 8])
    mock.get_dimension.return_value = 8
    mock.get_provider_name.return_value = "mock-embedding"
    mock.is_available.return_value = True
    return mock


# ---------------------------------------------------------------------------
# Article fetch
# ---------------------------------------------------------------------------


def make_article(url: str = "https://news.example.com/a", **overrides: Any) -> ArticleContent:
    fields = {
        "title": "Transit budget approved",
        "content": f"# Transit budget approved\n\n{LONG_PARAGRAPH}",
        "url": url,
        "time": "2025-03-04",
    }
    fields.update(overrides)
    return ArticleContent(**fields)


@pytest.fixture
def mock_article_provider() -> MagicMock:
    mock = MagicMock(spec=IArticleProvider)
    mock.fetch = AsyncMock(side_effect=lambda url: make_article(url))
    mock.get_provider_name.return_value = "mock-article"
    mock.is_available.return_value = True
    return mock


# ---------------------------------------------------------------------------
# Vector store
# ---------------------------------------------------------------------------


def make_document(doc_id: str = "doc-1", content: str = "chunk text", **metadata: Any) -> Document:
    return Document(
        id=doc_id,
        content=content,
        metadata=metadata or {"source": "Example", "url": "https://news.example.com/a"},
    )


@pytest.fixture
def mock_vector_store() -> MagicMock:
    mock = MagicMock(spec=IVectorStoreProvider)
    mock.initialize = AsyncMock(return_value=None)
    mock.add = AsyncMock(side_effect=lambda documents: len(documents))
    mock.query = AsyncMock(return_value=[])
    mock.update = AsyncMock(return_value=None)
    mock.delete = AsyncMock(return_value=None)
    mock.count.return_value = 0
    mock.collection_name = "news_articles"
    mock.get_provider_name.return_value = "mock-store"
    mock.is_available.return_value = True
    return mock


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def articles_csv(tmp_path: Path) -> Path:
    path = tmp_path / "articles.csv"
    path.write_text(
        "Source,URL\n"
        "Example News,https://news.example.com/a\n"
        "Example News,https://news.example.com/b\n",
        encoding="utf-8",
    )
    return path
