"""LLM provider adapters.

Three concrete implementations of ILLMProvider (src/interfaces/llm_provider.py):
    - AnthropicLLMProvider -- Claude Sonnet via the Messages streaming API
    - OpenAILLMProvider    -- gpt-4o-mini (also any OpenAI-compatible API)
    - OllamaLLMProvider    -- local llama3.1 via Ollama's OpenAI-compatible API

At startup, main.py picks the first provider with credentials configured
(Anthropic -> OpenAI -> Ollama) and shares it between the chunk extractor
and the answer service.
"""

from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.ollama_provider import OllamaLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider", "AnthropicLLMProvider", "OllamaLLMProvider"]
