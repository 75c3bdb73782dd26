"""Unit tests for the web scraper and CSV article source."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.interfaces.article_provider import UNAVAILABLE_TITLE, ArticleContent
from src.providers.article.csv_article_source import CSVArticleSource
from src.providers.article.web_scraper_provider import WebScraperProvider
from src.utils.errors import ConfigurationError

_HTML = """
<html><body>
  <nav><a href="/">Home</a></nav>
  <h1>Transit budget approved</h1>
  <time>2025-03-04</time>
  <p>The council voted on Tuesday.</p>
  <h2>Reactions</h2>
  <p>Residents welcomed the decision.</p>
  <ul><li>More buses</li><li>New bike lanes</li></ul>
  <h3>Next steps</h3>
</body></html>
"""


def _client_returning(text: str, status: int = 200) -> MagicMock:
    request = httpx.Request("GET", "https://news.example.com/a")
    response = httpx.Response(status, text=text, request=request)
    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(return_value=response)
    return client


class TestParseHtml:
    def test_markdown_rendering(self) -> None:
        article = WebScraperProvider.parse_html(_HTML, "https://news.example.com/a")

        assert article.title == "Transit budget approved"
        assert article.time == "2025-03-04"
        assert article.url == "https://news.example.com/a"
        lines = article.content.split("\n\n")
        assert lines[0] == "**Publication date:** 2025-03-04"
        assert lines[1] == "# Transit budget approved"
        assert "## Reactions" in lines
        assert "### Next steps" in lines
        assert "The council voted on Tuesday." in lines
        assert lines.index("- More buses") == lines.index("- New bike lanes") - 1
        assert lines[lines.index("- More buses") - 1] == ""

    def test_only_first_list_adds_separator(self) -> None:
        html = (
            "<body><p>Intro</p>"
            "<ol><li>Skipped ordered item</li></ol>"
            "<ul><li>First</li></ul>"
            "<p>Middle</p>"
            "<ul><li>Second</li></ul></body>"
        )
        lines = WebScraperProvider.parse_html(html, "u").content.split("\n\n")

        assert lines == ["Intro", "", "- First", "Middle", "- Second"]

    def test_nested_inline_text_is_not_respaced(self) -> None:
        html = "<body><h1> Rail <em>strike</em>s end </h1><p>a<b>b</b> c</p></body>"
        article = WebScraperProvider.parse_html(html, "u")

        assert article.title == "Rail strikes end"
        assert "ab c" in article.content.split("\n\n")

    def test_missing_time(self) -> None:
        article = WebScraperProvider.parse_html("<h1>T</h1><p>body</p>", "u")
        assert article.time is None
        assert not article.content.startswith("**Publication date:**")


class TestWebScraperProvider:
    @pytest.mark.asyncio
    async def test_fetch_success(self) -> None:
        provider = WebScraperProvider(http_client=_client_returning(_HTML))
        article = await provider.fetch("https://news.example.com/a")

        assert article.title == "Transit budget approved"
        assert not article.is_empty

    @pytest.mark.asyncio
    async def test_http_error_returns_sentinel(self) -> None:
        provider = WebScraperProvider(http_client=_client_returning("gone", status=404))
        article = await provider.fetch("https://news.example.com/a")

        assert article.title == UNAVAILABLE_TITLE
        assert article.content == ""
        assert article.time is None
        assert article.is_empty

    @pytest.mark.asyncio
    async def test_timeout_returns_sentinel(self) -> None:
        client = MagicMock(spec=httpx.AsyncClient)
        client.get = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        article = await WebScraperProvider(http_client=client).fetch("https://news.example.com/a")

        assert article == ArticleContent.unavailable("https://news.example.com/a")

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client_open(self) -> None:
        client = _client_returning(_HTML)
        client.aclose = AsyncMock()
        await WebScraperProvider(http_client=client).aclose()
        client.aclose.assert_not_awaited()

    def test_provider_metadata(self) -> None:
        provider = WebScraperProvider(http_client=_client_returning(""))
        assert provider.get_provider_name() == "web_scraper"
        assert provider.is_available() is True


class TestCSVArticleSource:
    @pytest.mark.asyncio
    async def test_load_skips_header(self, articles_csv: Path) -> None:
        articles = await CSVArticleSource(articles_csv).load()

        assert [a.url for a in articles] == [
            "https://news.example.com/a",
            "https://news.example.com/b",
        ]
        assert articles[0].source_name == "Example News"

    @pytest.mark.asyncio
    async def test_blank_and_short_rows_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "list.csv"
        path.write_text("Source,URL\nOnly one column\nX,\nY, https://y.example \n", encoding="utf-8")

        articles = await CSVArticleSource(path).load()

        assert len(articles) == 1
        assert articles[0].url == "https://y.example"

    @pytest.mark.asyncio
    async def test_header_only_file(self, tmp_path: Path) -> None:
        path = tmp_path / "list.csv"
        path.write_text("Source,URL\n", encoding="utf-8")
        assert await CSVArticleSource(path).load() == []

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            await CSVArticleSource(tmp_path / "missing.csv").load()
