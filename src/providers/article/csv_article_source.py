"""CSV article list loader.

Reads the ``Source,URL`` file that seeds ingestion.  The first row is a
header and is always skipped; columns are taken by position so header
spelling does not matter.  Rows with a blank URL are ignored.
"""

from __future__ import annotations

import asyncio
import csv
from pathlib import Path

import structlog

from src.interfaces.article_source import ArticleSource, IArticleSource
from src.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


class CSVArticleSource(IArticleSource):
    """Loads :class:`ArticleSource` records from a two-column CSV file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def load(self) -> list[ArticleSource]:
        # File reads are blocking; keep them off the event loop.
        return await asyncio.to_thread(self._read_sync)

    def get_provider_name(self) -> str:
        return "csv"

    def _read_sync(self) -> list[ArticleSource]:
        if not self._path.exists():
            raise ConfigurationError(
                message=f"Article list not found: {self._path}",
                provider_name=self.get_provider_name(),
            )

        articles: list[ArticleSource] = []
        with open(self._path, newline="", encoding="utf-8") as fh:
            reader = csv.reader(fh)
            next(reader, None)  # header row
            for row in reader:
                if len(row) < 2 or not row[1].strip():
                    continue
                articles.append(ArticleSource(source_name=row[0].strip(), url=row[1].strip()))

        logger.info("article_list_loaded", path=str(self._path), articles=len(articles))
        return articles
