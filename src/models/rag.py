"""RAG pipeline data models for the newsrag knowledge base.

Defines Pydantic v2 models for stored documents, LLM-structured chunks,
chunk-extraction outcomes and per-article ingestion results.  All models
use frozen config so values handed between pipeline stages cannot be
mutated in flight.

RAG overview:
    1. INGESTION: News articles listed in the article CSV are fetched and
       converted to markdown.
    2. STRUCTURING: An LLM splits each article into (heading, content)
       chunks (src/services/ingestion/chunk_extractor.py).
    3. EMBEDDING + STORAGE: Each chunk becomes one :class:`Document` whose
       content is embedded and written to ChromaDB
       (src/providers/vector_store/chromadb_provider.py).
    4. RETRIEVAL: Queries are embedded and the nearest documents become the
       context handed to the LLM (src/services/retrieval_service.py).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Metadata values accepted by the vector index.  Keys are fixed per use-case;
# article chunks carry category/title/chunkTitle/time/url/source.
MetadataValue = str | int | float | bool


# ---------------------------------------------------------------------------
# Document -- the unit stored in and returned from the vector index.
# ---------------------------------------------------------------------------
class Document(BaseModel):
    """A record in the vector index.

    ``content`` is the denormalized text that is both embedded and returned
    verbatim to callers.  ``embedding`` stays ``None`` until the store
    computes it; every stored embedding in one collection has the same
    length.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Globally unique, stable record identifier.")
    content: str = Field(description="Text fed to the embedding model and returned verbatim.")
    embedding: list[float] | None = Field(
        default=None,
        description="Precomputed embedding vector, or None to embed on write.",
    )
    metadata: dict[str, MetadataValue] = Field(
        default_factory=dict,
        description="Provenance metadata (source, url, time, ...).",
    )


# ---------------------------------------------------------------------------
# Chunk -- one LLM-structured section of an article.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """A (heading, content) block produced by structuring one article.

    Transient: chunks are mapped to :class:`Document` records immediately.
    The minimum content length is enforced by the chunk extractor's
    validation step, not here, so the threshold stays configurable.
    """

    model_config = ConfigDict(frozen=True)

    heading: str
    content: str


class ExtractionOutcome(BaseModel):
    """Result of the chunk extractor's bounded retry policy.

    ``chunks`` is empty whenever ``error`` is set; callers treat an empty
    outcome as "skip this article".
    """

    model_config = ConfigDict(frozen=True)

    chunks: list[Chunk] = Field(default_factory=list)
    attempts: int = Field(default=0, ge=0, description="LLM calls made.")
    error: str | None = Field(default=None, description="Last failure reason, if any.")

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Ingestion audit records.
# ---------------------------------------------------------------------------
class ErrorInfo(BaseModel):
    """Serializable description of an exception caught during ingestion."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Exception class name.")
    message: str = Field(description="Exception message.")

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        return cls(type=type(exc).__name__, message=str(exc))


class IngestResult(BaseModel):
    """Outcome of ingesting a single article.

    Returned (one per input article, in input order) by
    :meth:`src.services.ingestion.ingestion_service.IngestionService.ingest`
    so the caller can audit which sources failed.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    success: bool
    chunks_stored: int = Field(default=0, ge=0)
    error: ErrorInfo | None = None


class CorpusStats(BaseModel):
    """Snapshot of the collection's size, shown by the CLI and /health."""

    model_config = ConfigDict(frozen=True)

    collection_name: str
    total_documents: int = Field(default=0, ge=0)
