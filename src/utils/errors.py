"""Custom exception hierarchy for newsrag.

All application exceptions inherit from :class:`NewsRagError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "chromadb", "web_scraper") caused the
failure.

The hierarchy is organized by pipeline stage:

    NewsRagError  (base -- catch-all for any newsrag error)
    +-- FetchError                     (article download / HTML parsing)
    +-- ExtractionError                (LLM chunk structuring output)
    +-- EmbeddingError                 (embedding provider call)
    +-- GenerationError                (any LLM generation call)
    +-- StoreError                     (vector index write / read)
    |   +-- CollectionNotInitializedError
    +-- InitializationError            (vector index unreachable at startup)
    +-- ConfigurationError             (startup / missing config)

Callers handle errors at the level they care about -- the ingestion
pipeline records any per-article failure, the HTTP middleware turns any
``NewsRagError`` into a generic JSON error, and code that must distinguish
"not set up yet" from "index is down" catches
:class:`CollectionNotInitializedError` before :class:`StoreError`.
"""


class NewsRagError(Exception):
    """Base exception for all newsrag errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for log
    output, e.g. ``[chromadb] Query failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class FetchError(NewsRagError):
    """Raised when an article cannot be downloaded or parsed.

    Never crosses the fetch boundary: the article provider converts it into
    the "Can not load information" sentinel.
    """

    def __init__(
        self,
        message: str = "Article fetch failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ExtractionError(NewsRagError):
    """Raised when LLM chunk structuring returns malformed or invalid output."""

    def __init__(
        self,
        message: str = "Chunk extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(NewsRagError):
    """Raised when the embedding provider fails to produce a vector."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class GenerationError(NewsRagError):
    """Raised when an LLM generation call fails or returns nothing usable."""

    def __init__(
        self,
        message: str = "Text generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Vector store errors
# ---------------------------------------------------------------------------

class StoreError(NewsRagError):
    """Raised when a vector index operation fails or returns a malformed result."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CollectionNotInitializedError(StoreError):
    """Raised when the store is used before ``initialize()`` completed.

    This is a sequencing bug in the caller, not a transport failure.
    """

    def __init__(
        self,
        message: str = "Collection is not initialized",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InitializationError(NewsRagError):
    """Raised when the vector index is unreachable during collection setup."""

    def __init__(
        self,
        message: str = "Vector store initialization failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(NewsRagError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
