"""OpenAI-compatible LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
When a custom ``openai_base_url`` is configured (e.g. TogetherAI,
Anyscale, Fireworks), the client points at that URL instead of the default
OpenAI endpoint.

Completions are always requested with ``stream=True``; the chunk
extractor simply concatenates the stream through
:meth:`ILLMProvider.complete`, while the answer service forwards each
fragment to the HTTP client as it arrives.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import openai
import structlog

from src.config.settings import Settings
from src.interfaces.llm_provider import ILLMProvider
from src.utils.errors import GenerationError

logger = structlog.get_logger(logger_name=__name__)


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API.

    Uses ``gpt-4o-mini`` by default; override with ``OPENAI_TEXT_MODEL``.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key

        # 60s read timeout: structuring a long article can take a while.
        client_kwargs: dict = {
            "api_key": self._api_key,
            "timeout": openai.Timeout(60.0, connect=5.0),
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._text_model = settings.openai_text_model or "gpt-4o-mini"
        self._provider_label = "openai-compatible" if settings.openai_base_url else "openai"

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def stream(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> AsyncIterator[str]:
        """Stream a chat completion, yielding each non-empty content delta."""
        try:
            response = await self._client.chat.completions.create(
                model=self._text_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
            )
        except openai.APIError as exc:
            raise GenerationError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        fragments = 0
        try:
            async for event in response:
                if not event.choices:
                    continue
                text = event.choices[0].delta.content
                if text:
                    fragments += 1
                    yield text
        except openai.APIError as exc:
            raise GenerationError(
                message=f"{self._provider_label} stream error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        finally:
            # Releases the HTTP connection when the consumer stops early.
            await response.close()

        logger.debug(
            "openai_stream_complete",
            model=self._text_model,
            provider=self._provider_label,
            fragments=fragments,
        )

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        """Return 'openai' or 'openai-compatible' depending on configuration."""
        return self._provider_label
