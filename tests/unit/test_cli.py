"""Unit tests for the collection CLI (src.cli.ingest)."""

from __future__ import annotations

from argparse import Namespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.cli.ingest import (
    _build_parser,
    _handle_ingest,
    _handle_ingest_url,
    _handle_query,
    _handle_stats,
    main,
)
from src.models.rag import ErrorInfo, IngestResult
from src.utils.errors import InitializationError
from tests.conftest import make_document


def _components(**overrides) -> dict:
    ingestion_service = MagicMock()
    ingestion_service.ingest = AsyncMock(
        return_value=[IngestResult(url="https://news.example.com/a", success=True, chunks_stored=3)]
    )
    ingestion_service.ingest_url = AsyncMock(
        return_value=IngestResult(url="https://news.example.com/x", success=True, chunks_stored=2)
    )
    article_source = MagicMock()
    article_source.load = AsyncMock(return_value=["article"])
    retrieval_service = MagicMock()
    retrieval_service.search = AsyncMock(return_value=[])
    vector_store = MagicMock()
    vector_store.collection_name = "news_articles"
    vector_store.count.return_value = 42
    vector_store.initialize = AsyncMock()
    embedding_provider = MagicMock()
    embedding_provider.get_provider_name.return_value = "mock-embedding"
    http_client = MagicMock()
    http_client.aclose = AsyncMock()

    components = {
        "ingestion_service": ingestion_service,
        "article_source": article_source,
        "retrieval_service": retrieval_service,
        "vector_store": vector_store,
        "embedding_provider": embedding_provider,
        "http_client": http_client,
    }
    components.update(overrides)
    return components


class TestParser:
    def test_ingest_defaults(self) -> None:
        args = _build_parser().parse_args(["ingest"])
        assert args.command == "ingest"
        assert args.csv is None

    def test_ingest_url(self) -> None:
        args = _build_parser().parse_args(["ingest-url", "--url", "https://x.example"])
        assert args.url == "https://x.example"
        assert args.source == "manual"

    def test_query_top_k(self) -> None:
        args = _build_parser().parse_args(["query", "--text", "budget", "--top-k", "3"])
        assert args.text == "budget"
        assert args.top_k == 3


class TestHandlers:
    @pytest.mark.asyncio
    async def test_ingest_uses_configured_list(self, capsys) -> None:
        components = _components()
        code = await _handle_ingest(Namespace(csv=None), components)

        assert code == 0
        components["ingestion_service"].ingest.assert_awaited_once_with(["article"])
        assert "Chunks stored:  3" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_ingest_with_csv_override(self, articles_csv) -> None:
        components = _components()
        await _handle_ingest(Namespace(csv=str(articles_csv)), components)

        articles = components["ingestion_service"].ingest.await_args.args[0]
        assert [a.url for a in articles] == [
            "https://news.example.com/a",
            "https://news.example.com/b",
        ]
        components["article_source"].load.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ingest_reports_failures(self, capsys) -> None:
        failed = IngestResult(
            url="https://news.example.com/a",
            success=False,
            error=ErrorInfo(type="RuntimeError", message="boom"),
        )
        components = _components()
        components["ingestion_service"].ingest.return_value = [failed]

        assert await _handle_ingest(Namespace(csv=None), components) == 1
        assert "RuntimeError boom" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_ingest_url(self) -> None:
        components = _components()
        code = await _handle_ingest_url(
            Namespace(url="https://news.example.com/x", source="Wire"), components
        )

        assert code == 0
        components["ingestion_service"].ingest_url.assert_awaited_once_with(
            "https://news.example.com/x", source_name="Wire"
        )

    @pytest.mark.asyncio
    async def test_query_prints_documents(self, capsys) -> None:
        components = _components()
        components["retrieval_service"].search.return_value = [
            make_document("a", "Budget approved", title="Transit", url="https://news.example.com/a")
        ]

        assert await _handle_query(Namespace(text="budget", top_k=2), components) == 0
        out = capsys.readouterr().out
        assert "[1] Transit (https://news.example.com/a)" in out
        assert "Budget approved" in out

    @pytest.mark.asyncio
    async def test_stats(self, capsys) -> None:
        assert await _handle_stats(Namespace(), _components()) == 0
        out = capsys.readouterr().out
        assert "Collection:       news_articles" in out
        assert "Total documents:  42" in out


class TestMain:
    def test_no_command_prints_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_runs_command_and_closes_client(self) -> None:
        components = _components()
        with patch("src.main.build_services", return_value=components):
            with pytest.raises(SystemExit) as exc_info:
                main(["stats"])

        assert exc_info.value.code == 0
        components["vector_store"].initialize.assert_awaited_once()
        components["http_client"].aclose.assert_awaited_once()

    def test_application_error_exits_non_zero(self, capsys) -> None:
        components = _components()
        components["vector_store"].initialize.side_effect = InitializationError(
            message="unreachable", provider_name="chromadb"
        )
        with patch("src.main.build_services", return_value=components):
            with pytest.raises(SystemExit) as exc_info:
                main(["stats"])

        assert exc_info.value.code == 1
        assert "[chromadb] unreachable" in capsys.readouterr().err
        components["http_client"].aclose.assert_awaited_once()
