"""Context retrieval for the answer path and the plain search endpoint.

A query is routed one of two ways:

- **Direct fetch** -- when the query contains a URL, the first URL is
  fetched through the article provider and its full markdown body is the
  context.  The vector store is not consulted.
- **Vector lookup** -- otherwise the ``top_k`` nearest documents are
  retrieved and their contents joined into one context string.

No caching: every call hits the provider or the store.
"""

from __future__ import annotations

import re

import structlog

from src.interfaces.article_provider import IArticleProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import Document

logger = structlog.get_logger(logger_name=__name__)

_URL_RE = re.compile(r"https?://\S+")
_CONTEXT_SEPARATOR = "\n\n\n"


def extract_urls(text: str) -> list[str]:
    """Return every URL-shaped substring of *text*, in order of appearance."""
    return _URL_RE.findall(text)


class RetrievalService:
    """Builds LLM context from either a linked article or the vector store."""

    def __init__(
        self,
        vector_store: IVectorStoreProvider,
        article_provider: IArticleProvider,
        context_top_k: int = 7,
        search_top_k: int = 5,
    ) -> None:
        self._vector_store = vector_store
        self._article_provider = article_provider
        self._context_top_k = context_top_k
        self._search_top_k = search_top_k

    async def answer_context(self, query: str) -> str:
        """Return the context string used to ground an answer to *query*."""
        urls = extract_urls(query)
        if urls:
            article = await self._article_provider.fetch(urls[0])
            logger.info(
                "context_from_url",
                url=urls[0],
                content_length=len(article.content),
            )
            return article.content

        documents = await self._vector_store.query(query, top_k=self._context_top_k)
        logger.info(
            "context_from_store",
            query_length=len(query),
            documents=len(documents),
        )
        return _CONTEXT_SEPARATOR.join(doc.content for doc in documents)

    async def search(self, query: str, top_k: int | None = None) -> list[Document]:
        """Plain top-K lookup; no URL routing."""
        return await self._vector_store.query(query, top_k=top_k or self._search_top_k)

    @staticmethod
    def extract_urls(text: str) -> list[str]:
        return extract_urls(text)
