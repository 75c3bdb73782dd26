"""Abstract base class for the article list feeding ingestion.

The source list is loaded once (at startup backfill or from the CLI) and
is never persisted itself; only the chunks derived from each article are.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ArticleSource:
    """One entry of the article list: the publisher name and article URL."""

    source_name: str
    url: str


# Concrete implementation: CSVArticleSource (src/providers/article/)
class IArticleSource(ABC):
    """Contract for loaders returning the ordered list of articles to ingest."""

    @abstractmethod
    async def load(self) -> list[ArticleSource]:
        """Return all articles in source order (header rows excluded)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"csv"``."""
