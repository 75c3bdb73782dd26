"""Unit tests for RetrievalService routing and AnswerService streaming."""

from __future__ import annotations

import pytest

from src.interfaces.article_provider import ArticleContent
from src.services.answer_service import AnswerService
from src.services.retrieval_service import RetrievalService, extract_urls
from src.utils.errors import GenerationError
from tests.conftest import FakeLLMProvider, make_article, make_document


@pytest.fixture
def retrieval(mock_vector_store, mock_article_provider) -> RetrievalService:
    return RetrievalService(
        vector_store=mock_vector_store,
        article_provider=mock_article_provider,
    )


class TestExtractUrls:
    def test_finds_urls_in_order(self) -> None:
        text = "compare https://a.example/x and http://b.example/y?q=1 please"
        assert extract_urls(text) == ["https://a.example/x", "http://b.example/y?q=1"]

    def test_no_urls(self) -> None:
        assert extract_urls("what happened in city X") == []

    def test_static_alias(self) -> None:
        assert RetrievalService.extract_urls("see https://a.example") == ["https://a.example"]


class TestAnswerContext:
    @pytest.mark.asyncio
    async def test_url_query_fetches_directly(
        self, retrieval, mock_vector_store, mock_article_provider
    ) -> None:
        mock_article_provider.fetch.side_effect = lambda url: make_article(url, content="ARTICLE BODY")

        context = await retrieval.answer_context("summarize https://example.com/a")

        assert context == "ARTICLE BODY"
        mock_article_provider.fetch.assert_awaited_once_with("https://example.com/a")
        mock_vector_store.query.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_first_url_is_fetched(self, retrieval, mock_article_provider) -> None:
        await retrieval.answer_context("https://example.com/a vs https://example.com/b")
        mock_article_provider.fetch.assert_awaited_once_with("https://example.com/a")

    @pytest.mark.asyncio
    async def test_unavailable_article_gives_empty_context(
        self, retrieval, mock_article_provider
    ) -> None:
        mock_article_provider.fetch.side_effect = ArticleContent.unavailable
        assert await retrieval.answer_context("summarize https://example.com/a") == ""

    @pytest.mark.asyncio
    async def test_plain_query_uses_store_with_top_7(
        self, retrieval, mock_vector_store, mock_article_provider
    ) -> None:
        mock_vector_store.query.return_value = [
            make_document("a", "first chunk"),
            make_document("b", "second chunk"),
        ]

        context = await retrieval.answer_context("what happened in city X")

        assert context == "first chunk\n\n\nsecond chunk"
        mock_vector_store.query.assert_awaited_once_with("what happened in city X", top_k=7)
        mock_article_provider.fetch.assert_not_awaited()


class TestSearch:
    @pytest.mark.asyncio
    async def test_default_top_k(self, retrieval, mock_vector_store) -> None:
        await retrieval.search("budget")
        mock_vector_store.query.assert_awaited_once_with("budget", top_k=5)

    @pytest.mark.asyncio
    async def test_explicit_top_k(self, retrieval, mock_vector_store) -> None:
        await retrieval.search("budget", top_k=2)
        mock_vector_store.query.assert_awaited_once_with("budget", top_k=2)


class TestAnswerService:
    @pytest.mark.asyncio
    async def test_streams_fragments_in_order(self, retrieval, mock_vector_store) -> None:
        mock_vector_store.query.return_value = [make_document("a", "The budget passed.")]
        llm = FakeLLMProvider(["The council approved the budget."], chunk_size=5)
        service = AnswerService(retrieval, llm)

        fragments = [f async for f in service.stream_answer("did the budget pass?")]

        assert len(fragments) > 1
        assert "".join(fragments) == "The council approved the budget."

    @pytest.mark.asyncio
    async def test_prompt_contains_question_and_context(self, retrieval, mock_vector_store) -> None:
        mock_vector_store.query.return_value = [make_document("a", "The budget passed.")]
        llm = FakeLLMProvider(["ok"])

        await AnswerService(retrieval, llm).answer("did the budget pass?")

        prompt = llm.prompts[0]
        assert 'Question: "did the budget pass?"' in prompt
        assert "The budget passed." in prompt
        assert "state that you do not know" in prompt

    @pytest.mark.asyncio
    async def test_answer_buffers_stream(self, retrieval) -> None:
        llm = FakeLLMProvider(["full answer text"], chunk_size=3)
        assert await AnswerService(retrieval, llm).answer("q") == "full answer text"

    @pytest.mark.asyncio
    async def test_early_close_closes_upstream(self, retrieval) -> None:
        llm = FakeLLMProvider(["a long answer that is never fully read"], chunk_size=4)
        stream = AnswerService(retrieval, llm).stream_answer("q")

        assert await stream.__anext__() == "a lo"
        await stream.aclose()

        assert llm.closed == 1

    @pytest.mark.asyncio
    async def test_generation_error_propagates(self, retrieval) -> None:
        llm = FakeLLMProvider([GenerationError(message="down", provider_name="fake-llm")])
        with pytest.raises(GenerationError):
            await AnswerService(retrieval, llm).answer("q")
