"""newsrag domain models -- re-exports all public model classes.

Other modules may import from ``src.models`` directly instead of the
submodule (``from src.models import Document``).
"""

from __future__ import annotations

from src.models.rag import (
    Chunk,
    CorpusStats,
    Document,
    ErrorInfo,
    ExtractionOutcome,
    IngestResult,
    MetadataValue,
)

__all__ = [
    "Chunk",
    "CorpusStats",
    "Document",
    "ErrorInfo",
    "ExtractionOutcome",
    "IngestResult",
    "MetadataValue",
]
