"""Pydantic request/response schemas for the newsrag API.

Defines the public contract for the REST endpoints: semantic search,
the streaming answer agent, and health.  Request schemas end with
"Request", response schemas with "Response".
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.models.rag import CorpusStats, Document


class SearchRequest(BaseModel):
    """Body of ``POST /search``."""

    query: str = Field(..., min_length=1, max_length=2000)
    top_k: int | None = Field(default=None, ge=1, le=50)


class SearchResponse(BaseModel):
    """Nearest documents for a search query, most similar first."""

    chunks: list[Document]


class AgentRequest(BaseModel):
    """Body of ``POST /agent``.  A URL inside *query* switches to direct fetch."""

    query: str = Field(..., min_length=1, max_length=4000)


class HealthResponse(BaseModel):
    """Application health check response.

    *corpus* is ``None`` when the document store cannot be reached.
    """

    status: str
    version: str
    providers: dict[str, Any]
    corpus: CorpusStats | None = None


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
