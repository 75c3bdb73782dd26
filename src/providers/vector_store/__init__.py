"""Vector store provider implementations.

ChromaDB is the sole document store implementation.  It talks to a ChromaDB
server when CHROMADB_HOST is set and otherwise persists locally under
CHROMADB_PERSIST_DIR.  Collections use cosine distance.

To swap ChromaDB for another vector database, implement
IVectorStoreProvider and register it in main.py.
"""

from src.providers.vector_store.chromadb_provider import ChromaDBProvider

__all__ = ["ChromaDBProvider"]
