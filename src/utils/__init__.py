"""Utility modules for newsrag.

- **errors** -- Domain exception hierarchy rooted at NewsRagError; each
  stage (fetch, extraction, embedding, generation, storage) raises its own
  subclass.
- **concurrency** -- fixed-window batch scheduler used by ingestion.
- **logging** -- structlog setup with coloured console output in development
  and structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    CollectionNotInitializedError,
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    FetchError,
    GenerationError,
    InitializationError,
    NewsRagError,
    StoreError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import run_in_batches

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "CollectionNotInitializedError",
    "ConfigurationError",
    "EmbeddingError",
    "ExtractionError",
    "FetchError",
    "GenerationError",
    "InitializationError",
    "NewsRagError",
    "StoreError",
    "configure_logging",
    "get_logger",
    "run_in_batches",
]
