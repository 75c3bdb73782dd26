"""Embedding provider implementations.

Embeddings convert text into numeric vectors that capture semantic meaning.
These vectors are stored in ChromaDB and used for similarity search.

Implementations of IEmbeddingProvider (in selection priority order):
    1. OpenAIEmbeddingProvider -- text-embedding-3-small (1536 dims), needs
       an API key.
    2. NomicEmbeddingProvider  -- nomic-embed-text via Ollama (768 dims),
       free and local but requires a running Ollama server.
"""

from src.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from src.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider", "NomicEmbeddingProvider"]
