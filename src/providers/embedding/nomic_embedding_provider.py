"""Local embedding provider: ``nomic-embed-text`` served by Ollama.

Talks to Ollama's native ``POST /api/embed`` endpoint with httpx and needs
no API key.  Every returned vector is checked against the model's 768
dimensions before it reaches the document store, so a misconfigured model
tag fails here instead of corrupting the collection.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.config.settings import Settings
from src.interfaces.embedding_provider import IEmbeddingProvider
from src.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

_MODEL = "nomic-embed-text"
_DIMENSION = 768
# Inputs per /api/embed request.
_REQUEST_BATCH = 64
_EMBED_TIMEOUT = 60.0
_PING_TIMEOUT = 3.0


class NomicEmbeddingProvider(IEmbeddingProvider):
    """Embeds article chunks and queries with a locally pulled Ollama model.

    An ``httpx.AsyncClient`` may be shared with the rest of the app; when
    omitted the provider creates and owns one.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    async def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        vectors: list[list[float]] = []
        for start in range(0, len(texts), _REQUEST_BATCH):
            batch = texts[start : start + _REQUEST_BATCH]
            vectors.extend(await self._embed_request(batch))
        return vectors

    async def embed_single(self, text: str) -> list[float]:
        [vector] = await self._embed_request([text])
        return vector

    def get_dimension(self) -> int:
        return _DIMENSION

    def get_provider_name(self) -> str:
        return "nomic_embedding"

    def is_available(self) -> bool:
        """Return ``True`` when Ollama answers and has the model pulled."""
        if not self._base_url:
            return False
        try:
            response = httpx.get(f"{self._base_url}/api/tags", timeout=_PING_TIMEOUT)
            if response.status_code != 200:
                return False
            names = [str(m.get("name", "")) for m in response.json().get("models", [])]
        except (httpx.HTTPError, ValueError, AttributeError):
            return False
        return any(name.split(":")[0] == _MODEL for name in names)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _embed_request(self, batch: list[str]) -> list[list[float]]:
        try:
            response = await self._client.post(
                f"{self._base_url}/api/embed",
                json={"model": _MODEL, "input": batch},
                timeout=_EMBED_TIMEOUT,
            )
            response.raise_for_status()
            payload: Any = response.json()
        except httpx.HTTPError as exc:
            raise EmbeddingError(
                message=f"Ollama embed request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise EmbeddingError(
                message=f"Ollama returned a non-JSON embed response: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        vectors = payload.get("embeddings") if isinstance(payload, dict) else None
        if not isinstance(vectors, list) or len(vectors) != len(batch):
            raise EmbeddingError(
                message=(
                    f"Ollama returned {len(vectors) if isinstance(vectors, list) else 0} "
                    f"embeddings for {len(batch)} inputs"
                ),
                provider_name=self.get_provider_name(),
            )
        for vector in vectors:
            if len(vector) != _DIMENSION:
                raise EmbeddingError(
                    message=f"Expected {_DIMENSION}-dim vectors from {_MODEL}, got {len(vector)}",
                    provider_name=self.get_provider_name(),
                )

        logger.debug("nomic_embed_batch", inputs=len(batch))
        return [[float(value) for value in vector] for vector in vectors]
