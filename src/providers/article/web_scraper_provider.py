"""Web scraper article provider using httpx and BeautifulSoup.

Downloads a news page and rebuilds its body as markdown by walking the
headings, paragraphs and list items in document order:

    h1 / h2 / h3  ->  "# " / "## " / "### " prefixes
    p             ->  the paragraph text
    ul            ->  one blank separator line, at the first list only
    li            ->  "- " bullet, once the first ``ul`` has been seen

The first ``h1`` becomes the article title and the first ``time`` element
the publication date; both are prepended ahead of the body so the date
line leads.  Any failure yields the ``ArticleContent.unavailable`` sentinel
instead of an exception.
"""

from __future__ import annotations

import httpx
import structlog
from bs4 import BeautifulSoup

from src.interfaces.article_provider import ArticleContent, IArticleProvider
from src.utils.errors import FetchError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; newsrag/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}
_BLOCK_TAGS = ["h1", "h2", "h3", "p", "ul", "li"]
_HEADING_PREFIX = {"h1": "# ", "h2": "## ", "h3": "### "}


class WebScraperProvider(IArticleProvider):
    """Article fetch backed by httpx + BeautifulSoup.

    The ``httpx.AsyncClient`` may be injected (shared app client, or a mock
    in tests); otherwise one is created with a 10-second timeout.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=_DEFAULT_HEADERS,
            follow_redirects=True,
        )

    # ------------------------------------------------------------------
    # IArticleProvider implementation
    # ------------------------------------------------------------------

    async def fetch(self, url: str) -> ArticleContent:
        """Fetch *url* and convert it to markdown; sentinel on any failure."""
        try:
            html = await self._download(url)
            article = self.parse_html(html, url)
        except FetchError as exc:
            logger.warning("article_fetch_failed", url=url, error=str(exc))
            return ArticleContent.unavailable(url)
        except Exception as exc:  # noqa: BLE001 – parser failures degrade too
            logger.warning("article_parse_failed", url=url, error=str(exc))
            return ArticleContent.unavailable(url)

        logger.info(
            "article_fetched",
            url=url,
            title=article.title,
            content_length=len(article.content),
        )
        return article

    def is_available(self) -> bool:
        """Always available; no credentials required."""
        return True

    def get_provider_name(self) -> str:
        return "web_scraper"

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _download(self, url: str) -> str:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FetchError(
                message=f"Timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                message=f"HTTP {exc.response.status_code} for {url}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return response.text

    @staticmethod
    def parse_html(html: str, url: str) -> ArticleContent:
        """Convert an HTML page into an :class:`ArticleContent` with markdown body."""
        soup = BeautifulSoup(html, "html.parser")

        title_tag = soup.find("h1")
        title = title_tag.get_text().strip() if title_tag else ""
        time_tag = soup.find("time")
        time = (time_tag.get_text().strip() if time_tag else "") or None

        root = soup.body or soup
        lines: list[str] = []
        # Bullets are emitted only once the first <ul> has opened; later
        # lists add no further separator.
        in_list = False
        for element in root.find_all(_BLOCK_TAGS):
            text = element.get_text().strip()
            if not text:
                continue
            name = element.name
            if name in _HEADING_PREFIX:
                lines.append(f"{_HEADING_PREFIX[name]}{text}")
            elif name == "p":
                lines.append(text)
            elif name == "ul":
                if not in_list:
                    lines.append("")
                    in_list = True
            elif name == "li" and in_list:
                lines.append(f"- {text}")

        if title:
            lines.insert(0, f"# {title}")
        if time:
            lines.insert(0, f"**Publication date:** {time}")

        return ArticleContent(
            title=title,
            content="\n\n".join(lines),
            url=url,
            time=time,
        )
