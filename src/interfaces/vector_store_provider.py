"""Abstract base class for the document store (vector index).

Defines the contract for storing, querying and mutating
:class:`~src.models.rag.Document` records in one named collection.
Implementations own the collection handle exclusively; nothing else in the
application holds vector-store state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from src.models.rag import Document

# Coroutine factory run once by initialize() when the collection is empty.
BackfillFn = Callable[[], Awaitable[Any]]


# Concrete implementation: ChromaDBProvider (src/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for the document store used by ingestion and retrieval.

    Every method except :meth:`initialize` raises
    :class:`~src.utils.errors.CollectionNotInitializedError` when called
    before initialization completed.
    """

    @abstractmethod
    async def initialize(
        self,
        collection_name: str,
        backfill: BackfillFn | None = None,
    ) -> None:
        """Create or open *collection_name* with cosine-similarity scoring.

        Idempotent: opening the same name again reuses the collection.  When
        the collection holds no records and *backfill* is given, it is
        awaited exactly once.

        Raises
        ------
        src.utils.errors.InitializationError
            If the underlying index is unreachable.
        """

    @abstractmethod
    async def add(self, documents: list[Document]) -> int:
        """Embed documents lacking an embedding and upsert them in one write.

        Embedding failures are isolated per document: a failed document is
        dropped and logged, its siblings are still written.

        Returns
        -------
        int
            The number of documents written.

        Raises
        ------
        src.utils.errors.EmbeddingError
            If every document in a non-empty batch failed to embed.
        src.utils.errors.StoreError
            If the write fails.  No partial-success guarantee is given.
        """

    @abstractmethod
    async def query(self, text: str, top_k: int = 5) -> list[Document]:
        """Return the *top_k* documents nearest to *text*, most similar first.

        Raises
        ------
        src.utils.errors.StoreError
            If the index call fails or returns a malformed result.
        """

    @abstractmethod
    async def update(self, document: Document) -> None:
        """Replace the stored record with ``document.id``."""

    @abstractmethod
    async def delete(self, ids: list[str]) -> None:
        """Remove the records with the given ids."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of records in the collection."""

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the initialized collection."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the index answers a heartbeat."""
