"""LLM-based chunk extraction for scraped news articles.

Sends the markdown body of one article to an LLM provider with a fixed
structuring prompt and parses the JSON array it returns into
:class:`Chunk` models.

Validation is all-or-nothing per attempt: the response must be a JSON
list whose every element has string ``heading`` and ``content`` fields and
content of at least ``min_content_length`` characters.  One bad element
rejects the whole attempt.  ``max_retries`` is the total number of LLM
calls made before giving up; after the last failure the outcome carries
the error and :meth:`ChunkExtractor.extract` returns an empty list, which
the ingestion pipeline treats as "skip this article".
"""

from __future__ import annotations

import json
import re
from typing import Any

from src.interfaces.llm_provider import ILLMProvider
from src.models.rag import Chunk, ExtractionOutcome
from src.utils.errors import ExtractionError, GenerationError
from src.utils.logging import get_logger

# Every ```json or ``` marker is removed, wherever it appears in the response.
_FENCE_MARKER_RE = re.compile(r"```(?:json)?")

_DEFAULT_MAX_RETRIES = 1
_DEFAULT_MIN_CONTENT_LENGTH = 100

_PROMPT_TEMPLATE = """\
You are given a set of rules and an article's text scraped from a news website in markdown.
Strictly follow these rules to structure the article into logical blocks:

1. Analyze hierarchical structure.
2. Split the text into logical blocks:
   - "heading": heading text
   - "content": 3-5 related paragraphs
3. If no headings found:
   - Create logical sections by topic
4. Preserve all key information
5. Remove non-content elements (ads, comments, navigation, everything not related to the article)

Return a JSON array:
[{{
  "heading": "Section Title",
  "content": "Text content..."
}},...]

Article text: "{article_text}"
"""


class ChunkExtractor:
    """Structures article markdown into (heading, content) chunks via an LLM."""

    def __init__(
        self,
        llm_provider: ILLMProvider,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        min_content_length: int = _DEFAULT_MIN_CONTENT_LENGTH,
    ) -> None:
        self._llm = llm_provider
        self._max_retries = max(1, max_retries)
        self._min_content_length = min_content_length
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def extract(self, article_text: str) -> list[Chunk]:
        """Return the validated chunks for *article_text*, or ``[]`` on failure."""
        outcome = await self.extract_with_outcome(article_text)
        return list(outcome.chunks)

    async def extract_with_outcome(self, article_text: str) -> ExtractionOutcome:
        """Run the bounded retry policy and report how it went.

        Parameters
        ----------
        article_text:
            Markdown body of one article.

        Returns
        -------
        ExtractionOutcome
            Chunks plus the number of LLM calls made.  ``error`` holds the
            last failure reason when every attempt failed.
        """
        if not article_text.strip():
            self._logger.warning("empty_article_text")
            return ExtractionOutcome(chunks=[], attempts=0, error=None)

        prompt = self.build_prompt(article_text)
        last_error: str | None = None

        for attempt in range(1, self._max_retries + 1):
            try:
                response = await self._llm.complete(prompt, temperature=0.3, max_tokens=4000)
                chunks = self._parse_chunks(response)
            except (GenerationError, ExtractionError) as exc:
                last_error = str(exc)
                self._logger.warning(
                    "chunk_extraction_attempt_failed",
                    attempt=attempt,
                    max_retries=self._max_retries,
                    error=last_error,
                )
                continue

            self._logger.info(
                "chunk_extraction_complete",
                attempt=attempt,
                chunks=len(chunks),
                llm_provider=self._llm.get_provider_name(),
            )
            return ExtractionOutcome(chunks=chunks, attempts=attempt, error=None)

        self._logger.error(
            "chunk_extraction_failed",
            attempts=self._max_retries,
            error=last_error,
        )
        return ExtractionOutcome(chunks=[], attempts=self._max_retries, error=last_error)

    @staticmethod
    def build_prompt(article_text: str) -> str:
        # Double quotes would terminate the quoted article block in the prompt.
        return _PROMPT_TEMPLATE.format(article_text=article_text.replace('"', "'"))

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def _parse_chunks(self, response: str) -> list[Chunk]:
        """Parse and validate an LLM response; raise on any invalid element.

        Raises
        ------
        ExtractionError
            If the response is not valid JSON, not a list, or any element
            fails the heading/content checks.
        """
        text = _FENCE_MARKER_RE.sub("", response).strip()

        try:
            parsed: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ExtractionError(
                message=f"LLM response is not valid JSON: {exc}",
                provider_name=self._llm.get_provider_name(),
            ) from exc

        if not isinstance(parsed, list):
            raise ExtractionError(
                message="LLM response is not a JSON array",
                provider_name=self._llm.get_provider_name(),
            )

        chunks: list[Chunk] = []
        for index, block in enumerate(parsed):
            if not isinstance(block, dict):
                raise ExtractionError(
                    message=f"Block {index} is not an object",
                    provider_name=self._llm.get_provider_name(),
                )
            heading = block.get("heading")
            content = block.get("content")
            if not isinstance(heading, str) or not isinstance(content, str):
                raise ExtractionError(
                    message=f"Block {index} is missing a string heading or content",
                    provider_name=self._llm.get_provider_name(),
                )
            if len(content) < self._min_content_length:
                raise ExtractionError(
                    message=(
                        f"Block {index} content has {len(content)} characters, "
                        f"minimum is {self._min_content_length}"
                    ),
                    provider_name=self._llm.get_provider_name(),
                )
            chunks.append(Chunk(heading=heading, content=content))

        return chunks
