"""Abstract base class for article-fetch service providers.

Defines the contract for downloading a news article and reconstructing its
body as markdown.  Fetching never raises: a provider that cannot load a
page returns :meth:`ArticleContent.unavailable`, and both ingestion and
retrieval treat that sentinel as "no usable content".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

UNAVAILABLE_TITLE = "Can not load information"


@dataclass(frozen=True)
class ArticleContent:
    """A fetched article.

    Attributes
    ----------
    title:
        Text of the first ``h1`` on the page ("" when missing).
    content:
        Markdown rebuilt from the page's headings, paragraphs and list
        items, led by the publication-date line and title heading.
    url:
        The URL the article was fetched from.
    time:
        Text of the first ``time`` element, or ``None``.
    """

    title: str
    content: str
    url: str
    time: str | None = None

    @classmethod
    def unavailable(cls, url: str) -> ArticleContent:
        """Return the sentinel used when *url* could not be loaded."""
        return cls(title=UNAVAILABLE_TITLE, content="", url=url, time=None)

    @property
    def is_empty(self) -> bool:
        return not self.content.strip()


class IArticleProvider(ABC):
    """Contract for services that fetch a web article as markdown."""

    @abstractmethod
    async def fetch(self, url: str) -> ArticleContent:
        """Fetch *url* and return its content as markdown.

        Returns
        -------
        ArticleContent
            The article, or the ``unavailable`` sentinel on any network,
            timeout or parse failure.  This method does not raise.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"web_scraper"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is usable."""
