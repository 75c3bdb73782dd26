"""Grounded answer generation for the ``/agent`` endpoint.

Combines the retrieval context with the user's question in a fixed
virtual-assistant prompt and streams the LLM's answer back fragment by
fragment.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import structlog

from src.interfaces.llm_provider import ILLMProvider
from src.services.retrieval_service import RetrievalService

logger = structlog.get_logger(logger_name=__name__)

_PROMPT_TEMPLATE = """\
You are a virtual assistant specializing in providing accurate and useful answers.
Analyze the context and provide a comprehensive response.
If the context does not contain enough information to provide a complete answer, state that you do not know.

Question: "{query}"

Context:"{context}"
"""


class AnswerService:
    """Streams answers grounded in :class:`RetrievalService` context."""

    def __init__(self, retrieval_service: RetrievalService, llm_provider: ILLMProvider) -> None:
        self._retrieval = retrieval_service
        self._llm = llm_provider

    @staticmethod
    def build_prompt(query: str, context: str) -> str:
        return _PROMPT_TEMPLATE.format(query=query, context=context)

    async def stream_answer(self, query: str) -> AsyncIterator[str]:
        """Yield answer fragments as the LLM produces them.

        Closing this generator early closes the upstream LLM stream.

        Raises
        ------
        src.utils.errors.GenerationError
            If the LLM call fails.
        src.utils.errors.StoreError
            If the vector lookup fails.
        """
        context = await self._retrieval.answer_context(query)
        prompt = self.build_prompt(query, context)
        logger.info(
            "answer_stream_start",
            query_length=len(query),
            context_length=len(context),
            llm_provider=self._llm.get_provider_name(),
        )

        upstream = self._llm.stream(prompt)
        try:
            async for fragment in upstream:
                yield fragment
        finally:
            await upstream.aclose()

    async def answer(self, query: str) -> str:
        """Return the whole answer as one string."""
        return "".join([fragment async for fragment in self.stream_answer(query)])
