"""newsrag FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.

On startup the ChromaDB collection is opened; when it holds no documents
the article list is ingested once before the server accepts requests.

``build_services`` is also used by the CLI (``python -m src.cli``) so both
entry points select the same providers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.models.rag import IngestResult
from src.providers.article.csv_article_source import CSVArticleSource
from src.providers.article.web_scraper_provider import WebScraperProvider
from src.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from src.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.ollama_provider import OllamaLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider
from src.providers.vector_store.chromadb_provider import ChromaDBProvider
from src.services.answer_service import AnswerService
from src.services.ingestion.chunk_extractor import ChunkExtractor
from src.services.ingestion.ingestion_service import IngestionService
from src.services.retrieval_service import RetrievalService
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)

_VERSION = str(config.get("app", {}).get("version", "0.1.0"))


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first available LLM provider based on configured API keys.

    Priority order: Anthropic -> OpenAI -> Ollama (always available).
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    return OllamaLLMProvider(settings=app_settings)


def _build_embedding_provider(
    app_settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> IEmbeddingProvider:
    """Select the first available embedding provider.

    Priority: OpenAI/OpenAI-compatible (if API key set) ->
              Nomic/Ollama (if reachable with the model pulled).

    Raises
    ------
    ConfigurationError
        If neither provider is usable.
    """
    if app_settings.openai_api_key:
        provider: IEmbeddingProvider = OpenAIEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider

    provider = NomicEmbeddingProvider(settings=app_settings, http_client=http_client)
    if provider.is_available():
        return provider

    raise ConfigurationError(
        message=(
            "No embedding provider available: set OPENAI_API_KEY or run Ollama "
            "with nomic-embed-text pulled"
        ),
        provider_name="embedding",
    )


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_services(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance.

    Returns a flat dict of named components; the web app stores them on
    ``app.state``.  The caller owns ``http_client`` and must close it.
    """
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.fetch_timeout_seconds),
        follow_redirects=True,
    )

    primary_llm = _build_llm_provider(app_settings)
    embedding_provider = _build_embedding_provider(app_settings, http_client)

    article_provider = WebScraperProvider(
        http_client=http_client,
        timeout=app_settings.fetch_timeout_seconds,
    )
    article_source = CSVArticleSource(app_settings.articles_csv_path)

    vector_store = ChromaDBProvider(
        embedding_provider=embedding_provider,
        host=app_settings.chromadb_host,
        port=app_settings.chromadb_port,
        persist_directory=app_settings.chromadb_persist_dir,
    )

    chunk_extractor = ChunkExtractor(
        llm_provider=primary_llm,
        max_retries=app_settings.chunk_max_retries,
        min_content_length=app_settings.chunk_min_content_length,
    )
    ingestion_service = IngestionService(
        article_provider=article_provider,
        chunk_extractor=chunk_extractor,
        vector_store=vector_store,
        batch_size=app_settings.ingest_batch_size,
    )
    retrieval_service = RetrievalService(
        vector_store=vector_store,
        article_provider=article_provider,
        context_top_k=app_settings.retrieval_top_k,
        search_top_k=app_settings.search_top_k,
    )
    answer_service = AnswerService(
        retrieval_service=retrieval_service,
        llm_provider=primary_llm,
    )

    provider_registry: dict[str, Any] = {
        "llm": primary_llm.is_available(),
        "llm_name": primary_llm.get_provider_name(),
        "embedding": embedding_provider.get_provider_name(),
        "article": article_provider.get_provider_name(),
    }

    return {
        "http_client": http_client,
        "primary_llm": primary_llm,
        "embedding_provider": embedding_provider,
        "article_provider": article_provider,
        "article_source": article_source,
        "vector_store": vector_store,
        "chunk_extractor": chunk_extractor,
        "ingestion_service": ingestion_service,
        "retrieval_service": retrieval_service,
        "answer_service": answer_service,
        "provider_registry": provider_registry,
    }


async def ingest_article_list(components: dict[str, Any]) -> list[IngestResult]:
    """Load the configured article list and run it through ingestion."""
    article_source: CSVArticleSource = components["article_source"]
    ingestion_service: IngestionService = components["ingestion_service"]
    articles = await article_source.load()
    return await ingestion_service.ingest(articles)


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build services, open (and if empty backfill) the collection, clean up on shutdown."""
    components = build_services(settings)

    for key, value in components.items():
        setattr(application.state, key, value)
    application.state.version = _VERSION

    http_client: httpx.AsyncClient = components["http_client"]
    try:
        vector_store: ChromaDBProvider = components["vector_store"]
        await vector_store.initialize(
            settings.chromadb_collection,
            backfill=lambda: ingest_article_list(components),
        )

        _logger.info(
            "app_startup",
            version=_VERSION,
            environment=settings.app_env,
            primary_llm=components["provider_registry"]["llm_name"],
            collection=vector_store.collection_name,
            documents=vector_store.count(),
        )

        yield
    finally:
        await http_client.aclose()
        _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="newsrag API",
        version=_VERSION,
        description=(
            "Ingest news articles into a ChromaDB collection and answer "
            "questions grounded in the retrieved chunks or a linked article."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
