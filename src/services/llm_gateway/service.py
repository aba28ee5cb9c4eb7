"""LLM gateway service."""

import logging
from typing import Optional

from src.core.exceptions import ValidationError
from src.llm.base import LLMClient
from src.services.llm_gateway.models import LLMResponse

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant. "
    "Use the provided context to answer questions accurately."
)


def build_user_prompt(query: str, context: Optional[str] = None) -> str:
    """Interpolate context and question into the user message."""
    return f"Context: {context or 'No context provided.'}\n\nQuestion: {query}"


class LLMGatewayService:
    """Answers a question from supplied context with a fixed two-message prompt."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    async def answer(self, query: Optional[str], context: Optional[str] = "") -> LLMResponse:
        """
        Ask the completion provider to answer a query using the given context.

        Args:
            query: Question for the model (required)
            context: Optional grounding text

        Returns:
            LLMResponse with response text, model id and token usage

        Raises:
            ValidationError: If the query is missing or blank
            UpstreamError: If the completion call fails
        """
        if not query or not query.strip():
            raise ValidationError("Query is required")

        logger.debug(f"LLM query: {query[:200]}")
        logger.debug(f"LLM context: {len(context or '')} characters")

        completion = await self.llm_client.complete(
            prompt=build_user_prompt(query, context),
            system_instruction=SYSTEM_INSTRUCTION,
        )

        logger.info(
            f"Completion from {completion.model}: {len(completion.text)} characters, "
            f"{completion.usage.total_tokens} total tokens"
        )
        return LLMResponse(
            response=completion.text,
            model=completion.model,
            usage=completion.usage,
        )
