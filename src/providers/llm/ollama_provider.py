"""Ollama LLM provider adapter.

Ollama exposes an OpenAI-compatible ``/v1`` API, so this adapter reuses
:class:`OpenAILLMProvider`'s streaming implementation with the client
pointed at the local server.  Runs fully offline with no API costs.

Setup: install Ollama (https://ollama.ai), ``ollama pull llama3.1``, and
set OLLAMA_BASE_URL=http://localhost:11434
"""

from __future__ import annotations

import openai

from src.config.settings import Settings
from src.providers.llm.openai_provider import OpenAILLMProvider


class OllamaLLMProvider(OpenAILLMProvider):
    """LLM provider backed by a local Ollama server (``llama3.1`` by default)."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._api_key = "ollama"  # Ollama ignores the key but the SDK requires one
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url}/v1",
            api_key=self._api_key,
            timeout=openai.Timeout(120.0, connect=5.0),
        )
        self._text_model = "llama3.1"
        self._provider_label = "ollama"

    def is_available(self) -> bool:
        """Return ``True`` if the Ollama base URL is configured."""
        return bool(self._base_url)
