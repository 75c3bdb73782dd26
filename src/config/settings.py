"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables** -- e.g., OPENAI_API_KEY=sk-abc123
#   2. **.env file** -- key=value lines in the project root .env file
#
# Field `chromadb_collection` maps to env var `CHROMADB_COLLECTION`.
# Defaults apply when neither source defines a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """newsrag application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === LLM Providers ===
    # Empty string = "not configured"; provider selection skips it.
    openai_api_key: str = ""
    openai_base_url: str = ""  # Custom base URL for OpenAI-compatible APIs
    openai_text_model: str = ""  # Override text model (default gpt-4o-mini)
    openai_embedding_model: str = ""  # Override embedding model (default text-embedding-3-small)
    anthropic_api_key: str = ""
    anthropic_model: str = ""  # Override Claude model
    ollama_base_url: str = "http://localhost:11434"

    # === Vector Store ===
    # When chromadb_host is set, a ChromaDB server is used over HTTP;
    # otherwise data persists locally under chromadb_persist_dir.
    chromadb_host: str = ""
    chromadb_port: int = 8000
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "news_articles"

    # === Ingestion ===
    articles_csv_path: str = "./data/articles_dataset.csv"
    ingest_batch_size: int = 5
    chunk_max_retries: int = 1
    chunk_min_content_length: int = 100
    fetch_timeout_seconds: float = 10.0

    # === Retrieval ===
    retrieval_top_k: int = 7
    search_top_k: int = 5

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names that have credentials configured."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
