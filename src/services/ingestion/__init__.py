"""Article ingestion pipeline for the newsrag knowledge base.

Stages per article: **fetch -> structure -> compose -> store**.

1. **Fetch** (src/providers/article/) -- the web scraper renders the page
   body as markdown, or returns the unavailable sentinel.
2. **Structure** (chunk_extractor.py / ChunkExtractor) -- an LLM splits the
   markdown into (heading, content) chunks, validated all-or-nothing.
3. **Compose + store** (ingestion_service.py / IngestionService) -- one
   Document per chunk with provenance metadata, embedded and written by
   the vector store.
"""

from src.services.ingestion.chunk_extractor import ChunkExtractor
from src.services.ingestion.ingestion_service import IngestionService

__all__ = [
    "ChunkExtractor",
    "IngestionService",
]
