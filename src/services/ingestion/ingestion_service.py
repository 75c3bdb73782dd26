"""Orchestrator for the news-article ingestion pipeline.

Pipeline stages per article: **fetch -> structure -> compose -> store**.

The :class:`IngestionService` coordinates three collaborators (article
provider, chunk extractor, document store) without any of them knowing
about each other:

    1. IArticleProvider -- downloads the page and renders it as markdown
    2. ChunkExtractor -- asks the LLM to split the markdown into
       (heading, content) chunks
    3. compose -- one :class:`Document` per chunk, carrying provenance
       metadata for citations
    4. IVectorStoreProvider -- embeds and persists the documents

Articles are processed in fixed windows of ``batch_size``: the articles of
one window run concurrently, and the next window only starts once all of
them have settled.  A failure in one article is recorded in its
:class:`IngestResult` and never aborts the run.
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

import structlog

from src.interfaces.article_source import ArticleSource
from src.models.rag import Chunk, Document, ErrorInfo, IngestResult
from src.utils.concurrency import run_in_batches

if TYPE_CHECKING:
    from src.interfaces.article_provider import ArticleContent, IArticleProvider
    from src.interfaces.vector_store_provider import IVectorStoreProvider
    from src.services.ingestion.chunk_extractor import ChunkExtractor

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_BATCH_SIZE = 5


class IngestionService:
    """Runs articles through fetch -> structure -> store in bounded batches.

    Parameters
    ----------
    article_provider:
        Fetches article pages; returns the unavailable sentinel instead of
        raising.
    chunk_extractor:
        Structures article markdown into chunks.
    vector_store:
        Initialized document store the chunks are written to.
    batch_size:
        Number of articles processed concurrently per window.
    """

    def __init__(
        self,
        article_provider: IArticleProvider,
        chunk_extractor: ChunkExtractor,
        vector_store: IVectorStoreProvider,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._article_provider = article_provider
        self._chunk_extractor = chunk_extractor
        self._vector_store = vector_store
        self._batch_size = batch_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(self, articles: list[ArticleSource]) -> list[IngestResult]:
        """Ingest every article and return one result per input, in order."""
        start = time.monotonic()
        logger.info(
            "ingestion_start",
            articles=len(articles),
            batch_size=self._batch_size,
        )

        outcomes = await run_in_batches(articles, self._ingest_one, self._batch_size)

        results: list[IngestResult] = []
        for article, outcome in zip(articles, outcomes, strict=True):
            # _ingest_one records its own failures; this only catches bugs
            # that escaped it.
            if isinstance(outcome, BaseException):
                results.append(
                    IngestResult(
                        url=article.url,
                        success=False,
                        error=ErrorInfo.from_exception(outcome),
                    )
                )
            else:
                results.append(outcome)

        failed = sum(1 for r in results if not r.success)
        logger.info(
            "ingestion_complete",
            articles=len(results),
            succeeded=len(results) - failed,
            failed=failed,
            chunks_stored=sum(r.chunks_stored for r in results),
            ingestion_time=round(time.monotonic() - start, 2),
        )
        return results

    async def ingest_url(self, url: str, source_name: str = "manual") -> IngestResult:
        """Ingest a single article through the same per-article path."""
        return await self._ingest_one(ArticleSource(source_name=source_name, url=url))

    # ------------------------------------------------------------------
    # Per-article pipeline
    # ------------------------------------------------------------------

    async def _ingest_one(self, article: ArticleSource) -> IngestResult:
        try:
            content = await self._article_provider.fetch(article.url)
            if content.is_empty:
                logger.warning("ingest_article_empty", url=article.url)
                return IngestResult(url=article.url, success=True, chunks_stored=0)

            chunks = await self._chunk_extractor.extract(content.content)
            if not chunks:
                logger.warning("ingest_article_no_chunks", url=article.url)
                return IngestResult(url=article.url, success=True, chunks_stored=0)

            documents = self._to_documents(article, content, chunks)
            stored = await self._vector_store.add(documents)
        except Exception as exc:  # noqa: BLE001 – recorded per article
            logger.error(
                "ingest_article_failed",
                url=article.url,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return IngestResult(
                url=article.url,
                success=False,
                error=ErrorInfo.from_exception(exc),
            )

        logger.info(
            "ingest_article_complete",
            url=article.url,
            source=article.source_name,
            chunks=len(chunks),
            stored=stored,
        )
        return IngestResult(url=article.url, success=True, chunks_stored=stored)

    @staticmethod
    def _to_documents(
        article: ArticleSource,
        content: ArticleContent,
        chunks: list[Chunk],
    ) -> list[Document]:
        """Map chunks to documents with ids unique per ingestion run."""
        run_id = uuid.uuid4()
        time_label = content.time or "unknown"
        return [
            Document(
                id=f"{article.url}-{run_id}-{index}",
                content=(
                    f"# {chunk.heading}\n\n"
                    f"{chunk.content}\n\n"
                    f"Publication date: {time_label}\n"
                    f"url: {article.url}"
                ),
                metadata={
                    "category": "article",
                    "title": content.title,
                    "chunkTitle": chunk.heading,
                    "time": time_label,
                    "url": article.url,
                    "source": article.source_name,
                },
            )
            for index, chunk in enumerate(chunks)
        ]
