"""OpenAI LLM client."""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from src.core.exceptions import UpstreamError
from src.llm.base import LLMCompletion, LLMUsage

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Client for OpenAI chat completions."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise UpstreamError("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def complete(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
    ) -> LLMCompletion:
        """
        Generate a completion using OpenAI.

        Args:
            prompt: User prompt
            system_instruction: Optional system instruction

        Returns:
            Completion text with model id and token usage

        Raises:
            UpstreamError: If the key is missing or the completion call fails
        """
        messages = []

        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI completion failed: {e}")
            raise UpstreamError(str(e)) from e

        content = response.choices[0].message.content or ""
        usage = LLMUsage()
        if response.usage is not None:
            usage = LLMUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        logger.debug(f"Generated content with {len(content)} characters")
        return LLMCompletion(text=content, model=response.model or self.model, usage=usage)
