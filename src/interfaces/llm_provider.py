"""Abstract base class for LLM service providers.

Defines the generative text capability used twice in newsrag: the chunk
extractor asks for a JSON structuring of an article, and the answer
service streams a grounded answer back to the HTTP client.

Generation is modelled as a lazy async stream of text fragments.  The
buffered :meth:`ILLMProvider.complete` is simply the fragments concatenated
in arrival order, so every provider implements only :meth:`stream`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


# Concrete implementations: OpenAILLMProvider, AnthropicLLMProvider, OllamaLLMProvider
# Located in: src/providers/llm/
class ILLMProvider(ABC):
    """Contract for LLM services used throughout the newsrag pipeline."""

    @abstractmethod
    def stream(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> AsyncIterator[str]:
        """Stream a completion for *prompt* as text fragments.

        Implementations are async generators.  Closing the generator early
        (``aclose()``, or a consumer that stops iterating) closes the
        upstream HTTP stream without buffering unread fragments.

        Parameters
        ----------
        prompt:
            The full prompt text.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Yields
        ------
        str
            Non-empty text fragments in arrival order.

        Raises
        ------
        src.utils.errors.GenerationError
            If the API call fails at any point of the stream.
        """

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        """Return the whole completion for *prompt* as one string.

        Raises
        ------
        src.utils.errors.GenerationError
            If the API call fails.
        """
        fragments: list[str] = []
        async for fragment in self.stream(prompt, temperature=temperature, max_tokens=max_tokens):
            fragments.append(fragment)
        return "".join(fragments)

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are present (no network call)."""
