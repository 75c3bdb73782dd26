"""FastAPI route handlers for the newsrag API.

Endpoints:

- ``POST /search``  -- top-K semantic search over the article collection
- ``POST /agent``   -- grounded answer streamed as chunked ``text/plain``
- ``GET  /health``  -- provider availability and collection size

Services are built once at startup (``build_services`` in main.py), stored on
``app.state`` and resolved per request through ``Depends`` helpers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from src.api.schemas import AgentRequest, HealthResponse, SearchRequest, SearchResponse
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.rag import CorpusStats
from src.services.answer_service import AnswerService
from src.services.retrieval_service import RetrievalService
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_retrieval_service(request: Request) -> RetrievalService:
    return request.app.state.retrieval_service


def _get_answer_service(request: Request) -> AnswerService:
    return request.app.state.answer_service


def _get_vector_store(request: Request) -> IVectorStoreProvider:
    return request.app.state.vector_store


RetrievalDep = Annotated[RetrievalService, Depends(_get_retrieval_service)]
AnswerDep = Annotated[AnswerService, Depends(_get_answer_service)]
VectorStoreDep = Annotated[IVectorStoreProvider, Depends(_get_vector_store)]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Semantic search over ingested articles",
)
async def search(body: SearchRequest, retrieval: RetrievalDep) -> SearchResponse:
    documents = await retrieval.search(body.query, top_k=body.top_k)
    return SearchResponse(chunks=documents)


@router.post(
    "/agent",
    summary="Stream an answer grounded in retrieved context",
    response_class=StreamingResponse,
)
async def agent(body: AgentRequest, answers: AnswerDep) -> StreamingResponse:
    """Stream the answer for ``body.query`` as plain text.

    The first fragment is awaited before the response starts so retrieval
    and provider errors still reach the error middleware as a JSON 500.
    """
    fragments = answers.stream_answer(body.query)
    try:
        first = await anext(fragments)
    except StopAsyncIteration:
        first = ""

    async def _body() -> AsyncIterator[str]:
        try:
            if first:
                yield first
            async for fragment in fragments:
                yield fragment
        except Exception as exc:  # noqa: BLE001 – headers already sent
            logger.error("agent_stream_failed", error_type=type(exc).__name__, error=str(exc))
        finally:
            await fragments.aclose()

    return StreamingResponse(_body(), media_type="text/plain")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request, vector_store: VectorStoreDep) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))

    corpus: CorpusStats | None = None
    try:
        corpus = CorpusStats(
            collection_name=vector_store.collection_name,
            total_documents=vector_store.count(),
        )
        providers["vector_store"] = True
    except Exception as exc:  # noqa: BLE001
        logger.warning("health_store_unavailable", error=str(exc))
        providers["vector_store"] = False

    if providers["vector_store"] and providers.get("llm", False):
        status = "healthy"
    elif providers["vector_store"]:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=providers,
        corpus=corpus,
    )
