"""Public interface definitions for all external service providers.

Every external API or service in the newsrag pipeline is accessed through
the abstract base classes defined in this package.  Concrete adapters
implement these interfaces and are injected at runtime, so business logic
never imports an SDK directly and unit tests can inject fakes.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    ILLMProvider               →  OpenAILLMProvider, AnthropicLLMProvider,
                                  OllamaLLMProvider
    IEmbeddingProvider         →  OpenAIEmbeddingProvider,
                                  NomicEmbeddingProvider
    IArticleProvider           →  WebScraperProvider
    IArticleSource             →  CSVArticleSource
    IVectorStoreProvider       →  ChromaDBProvider
"""

from src.interfaces.article_provider import ArticleContent, IArticleProvider
from src.interfaces.article_source import ArticleSource, IArticleSource
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "ArticleContent",
    "ArticleSource",
    "IArticleProvider",
    "IArticleSource",
    "IEmbeddingProvider",
    "ILLMProvider",
    "IVectorStoreProvider",
]
