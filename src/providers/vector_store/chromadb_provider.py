"""ChromaDB document store adapter.

Implements :class:`IVectorStoreProvider` on top of a ChromaDB collection
configured for cosine distance.  The client is ``chromadb.HttpClient`` when
a server host is configured and ``chromadb.PersistentClient`` otherwise.

The collection handle is owned by this class and only exists after
:meth:`ChromaDBProvider.initialize`; every other operation goes through the
``_ready_collection`` guard, which raises
:class:`CollectionNotInitializedError` instead of letting a ``None`` handle
leak into call sites.
"""

from __future__ import annotations

import asyncio
import os
import re
from typing import Any

# ChromaDB reads this before the client is built; Settings below repeats it
# for versions that ignore the environment variable.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.vector_store_provider import BackfillFn, IVectorStoreProvider
from src.models.rag import Document
from src.utils.errors import (
    CollectionNotInitializedError,
    EmbeddingError,
    InitializationError,
    StoreError,
)

logger = structlog.get_logger(logger_name=__name__)

_COLLECTION_METADATA = {"hnsw:space": "cosine"}

# ChromaDB collection naming rules: 3-63 characters from [a-zA-Z0-9._-],
# alphanumeric at both ends, no "..", and not an IPv4 address.
_COLLECTION_NAME_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]{1,61}[a-zA-Z0-9]$")
_IPV4_RE = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Embedding function that must never run.

    All embeddings come from the injected :class:`IEmbeddingProvider`;
    passing this stops ChromaDB from downloading its default ONNX model
    when the collection is created.
    """

    def __init__(self) -> None:
        pass

    def __call__(self, input: list[str]) -> list[list[float]]:  # noqa: A002
        raise NotImplementedError(
            "newsrag uses pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Document store backed by a single ChromaDB collection.

    Parameters
    ----------
    embedding_provider:
        Used to embed documents on :meth:`add` / :meth:`update` and query
        text on :meth:`query`.
    host, port:
        ChromaDB server address.  Leave *host* empty for local persistence.
    persist_directory:
        On-disk location for the local ``PersistentClient``.
    client:
        Pre-built ChromaDB client (tests use an ephemeral/persistent one).
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        *,
        host: str = "",
        port: int = 8000,
        persist_directory: str = "./data/chromadb",
        client: Any | None = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._host = host
        self._port = port
        self._persist_directory = persist_directory
        self._client = client
        self._collection: Any | None = None
        self._collection_name: str | None = None
        self._init_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(
        self,
        collection_name: str,
        backfill: BackfillFn | None = None,
    ) -> None:
        """Create or open *collection_name*; backfill once if it is empty."""
        if not self._is_valid_collection_name(collection_name):
            raise InitializationError(
                message=(
                    f"Invalid collection name '{collection_name}': expected 3-63 "
                    "characters from [a-zA-Z0-9._-], alphanumeric at both ends, "
                    "no '..' and not an IPv4 address"
                ),
                provider_name=self.get_provider_name(),
            )

        async with self._init_lock:
            try:
                client = self._get_client()
                collection = self._open_collection(client, collection_name)
                existing = collection.count()
            except Exception as exc:
                raise InitializationError(
                    message=f"ChromaDB unreachable while opening '{collection_name}': {exc}",
                    provider_name=self.get_provider_name(),
                ) from exc

            self._collection = collection
            self._collection_name = collection_name
            logger.info(
                "chromadb_collection_ready",
                collection=collection_name,
                documents=existing,
            )

            if existing > 0:
                self._validate_embedding_dimensions()
                return

            if backfill is not None:
                logger.info("chromadb_backfill_start", collection=collection_name)
                await backfill()
                logger.info(
                    "chromadb_backfill_complete",
                    collection=collection_name,
                    documents=collection.count(),
                )

    @staticmethod
    def _is_valid_collection_name(name: str) -> bool:
        return (
            bool(_COLLECTION_NAME_RE.match(name))
            and ".." not in name
            and not _IPV4_RE.match(name)
        )

    def _get_client(self) -> Any:
        if self._client is None:
            settings = chromadb.config.Settings(anonymized_telemetry=False)
            if self._host:
                self._client = chromadb.HttpClient(
                    host=self._host, port=self._port, settings=settings
                )
            else:
                self._client = chromadb.PersistentClient(
                    path=self._persist_directory, settings=settings
                )
        return self._client

    @staticmethod
    def _open_collection(client: Any, collection_name: str) -> Any:
        # Collections created by another tool may have a persisted embedding
        # function that conflicts with ours; open those without one.
        try:
            return client.get_or_create_collection(
                name=collection_name,
                metadata=_COLLECTION_METADATA,
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            return client.get_or_create_collection(
                name=collection_name,
                metadata=_COLLECTION_METADATA,
            )

    def _validate_embedding_dimensions(self) -> None:
        """Fail loud when the provider's dimension differs from stored vectors."""
        collection = self._ready_collection
        try:
            sample = collection.peek(limit=1)
        except Exception as exc:  # noqa: BLE001 – advisory check only
            logger.warning("embedding_dimension_check_skipped", error=str(exc))
            return

        embeddings = sample.get("embeddings") if sample else None
        if embeddings is None or len(embeddings) == 0:
            return

        stored_dim = len(embeddings[0])
        expected_dim = self._embedding_provider.get_dimension()
        if stored_dim != expected_dim:
            raise InitializationError(
                message=(
                    f"Embedding dimension mismatch: collection '{self._collection_name}' "
                    f"holds {stored_dim}-dim vectors but provider "
                    f"'{self._embedding_provider.get_provider_name()}' produces "
                    f"{expected_dim}-dim vectors"
                ),
                provider_name=self.get_provider_name(),
            )
        logger.info("embedding_dimension_validated", dimension=stored_dim)

    @property
    def _ready_collection(self) -> Any:
        if self._collection is None:
            raise CollectionNotInitializedError(provider_name=self.get_provider_name())
        return self._collection

    @property
    def collection_name(self) -> str:
        if self._collection_name is None:
            raise CollectionNotInitializedError(provider_name=self.get_provider_name())
        return self._collection_name

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def add(self, documents: list[Document]) -> int:
        """Embed missing vectors one document at a time, then upsert in one write."""
        collection = self._ready_collection
        if not documents:
            return 0

        embedded = await self._embed_missing(documents)
        if not embedded:
            raise EmbeddingError(
                message=f"All {len(documents)} documents failed to embed",
                provider_name=self._embedding_provider.get_provider_name(),
            )

        kwargs: dict[str, Any] = {
            "ids": [doc.id for doc in embedded],
            "embeddings": [doc.embedding for doc in embedded],
            "documents": [doc.content for doc in embedded],
        }
        # ChromaDB rejects empty metadata dicts but accepts None per record.
        if any(doc.metadata for doc in embedded):
            kwargs["metadatas"] = [dict(doc.metadata) or None for doc in embedded]

        try:
            collection.upsert(**kwargs)
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB upsert of {len(embedded)} documents failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "chromadb_add",
            requested=len(documents),
            stored=len(embedded),
            dropped=len(documents) - len(embedded),
        )
        return len(embedded)

    async def query(self, text: str, top_k: int = 5) -> list[Document]:
        """Embed *text* and return the *top_k* nearest documents."""
        collection = self._ready_collection
        try:
            total = collection.count()
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if total == 0 or top_k <= 0:
            return []

        query_embedding = await self._embedding_provider.embed_single(text)

        try:
            results = collection.query(
                query_embeddings=[query_embedding],
                n_results=min(top_k, total),
                include=["documents", "metadatas", "embeddings", "distances"],
            )
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        documents = self._results_to_documents(results)
        logger.info(
            "chromadb_query",
            query_length=len(text),
            top_k=top_k,
            results_count=len(documents),
        )
        return documents

    async def update(self, document: Document) -> None:
        collection = self._ready_collection
        embedding = document.embedding
        if embedding is None:
            embedding = await self._embedding_provider.embed_single(document.content)

        kwargs: dict[str, Any] = {
            "ids": [document.id],
            "embeddings": [embedding],
            "documents": [document.content],
        }
        if document.metadata:
            kwargs["metadatas"] = [dict(document.metadata)]

        try:
            collection.update(**kwargs)
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB update of '{document.id}' failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("chromadb_update", document_id=document.id)

    async def delete(self, ids: list[str]) -> None:
        collection = self._ready_collection
        if not ids:
            return
        try:
            collection.delete(ids=ids)
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB delete failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("chromadb_delete", count=len(ids))

    def count(self) -> int:
        collection = self._ready_collection
        try:
            return collection.count()
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        """Return ``True`` if the ChromaDB client answers a heartbeat."""
        try:
            self._get_client().heartbeat()
            return True
        except Exception:  # noqa: BLE001
            logger.warning("chromadb_heartbeat_failed", exc_info=True)
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _embed_missing(self, documents: list[Document]) -> list[Document]:
        """Return *documents* with embeddings filled in, minus failed ones.

        One ``embed_single`` call per document, all awaited together; a
        failure drops only that document.
        """
        pending = [doc for doc in documents if doc.embedding is None]
        results = await asyncio.gather(
            *(self._embedding_provider.embed_single(doc.content) for doc in pending),
            return_exceptions=True,
        )

        vectors: dict[str, list[float]] = {}
        for doc, result in zip(pending, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "document_embedding_failed",
                    document_id=doc.id,
                    error=str(result),
                )
                continue
            vectors[doc.id] = list(result)

        embedded: list[Document] = []
        for doc in documents:
            if doc.embedding is not None:
                embedded.append(doc)
            elif doc.id in vectors:
                embedded.append(doc.model_copy(update={"embedding": vectors[doc.id]}))
        return embedded

    def _results_to_documents(self, results: Any) -> list[Document]:
        """Rebuild :class:`Document` records from a ChromaDB query result."""
        try:
            ids = results["ids"]
            contents = results["documents"]
            metadatas = results["metadatas"]
            embeddings = results["embeddings"]
        except (KeyError, TypeError) as exc:
            raise StoreError(
                message=f"Invalid ChromaDB response structure: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if ids is None or contents is None or metadatas is None or embeddings is None:
            raise StoreError(
                message="Invalid ChromaDB response structure: missing fields",
                provider_name=self.get_provider_name(),
            )
        if len(ids) == 0:
            return []

        row_ids = ids[0]
        row_contents = contents[0]
        row_metas = metadatas[0]
        row_embeddings = embeddings[0]
        if not (len(row_ids) == len(row_contents) == len(row_metas) == len(row_embeddings)):
            raise StoreError(
                message="Invalid ChromaDB response structure: field lengths differ",
                provider_name=self.get_provider_name(),
            )

        return [
            Document(
                id=str(doc_id),
                content=content or "",
                embedding=[float(value) for value in embedding],
                metadata=dict(meta or {}),
            )
            for doc_id, content, meta, embedding in zip(
                row_ids, row_contents, row_metas, row_embeddings, strict=True
            )
        ]
