"""Google Gemini LLM client with rotating API key support."""

import logging
from typing import Optional

from google.genai import types
from google.genai.errors import APIError, ClientError

from src.core.exceptions import UpstreamError
from src.llm.base import LLMCompletion, LLMUsage
from src.llm.key_rotator import GeminiKeyRotator

logger = logging.getLogger(__name__)


class GeminiClient:
    """Client for Google Gemini LLM with automatic key rotation on rate limits."""

    def __init__(self, rotator: GeminiKeyRotator, model: str = "gemini-2.0-flash"):
        self.model = model
        self._rotator = rotator

    async def complete(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
    ) -> LLMCompletion:
        """
        Generate a completion using Gemini with key rotation on rate limits.

        Args:
            prompt: User prompt
            system_instruction: Optional system instruction

        Returns:
            Completion text with model id and token usage

        Raises:
            UpstreamError: If no key is configured, all keys are rate limited,
                or the call fails
        """
        config = types.GenerateContentConfig(system_instruction=system_instruction)

        # Try each key once before giving up
        num_keys = len(self._rotator)
        if num_keys == 0:
            raise UpstreamError("GEMINI_API_KEY is not configured")
        last_error: Optional[Exception] = None

        for attempt in range(num_keys):
            client = self._rotator.get_client()
            try:
                response = await client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=config,
                )
            except ClientError as e:
                # Check if it's a rate limit error (HTTP 429)
                if "429" in str(e) or "quota" in str(e).lower():
                    last_error = e
                    logger.warning(
                        f"Rate limit hit on API key {attempt + 1}/{num_keys}, rotating..."
                    )
                    self._rotator.rotate()
                    continue
                raise UpstreamError(str(e)) from e
            except APIError as e:
                raise UpstreamError(str(e)) from e

            text = response.text or ""
            usage = LLMUsage()
            metadata = response.usage_metadata
            if metadata is not None:
                usage = LLMUsage(
                    prompt_tokens=metadata.prompt_token_count,
                    completion_tokens=metadata.candidates_token_count,
                    total_tokens=metadata.total_token_count,
                )
            logger.debug(f"Generated content with {len(text)} characters")
            return LLMCompletion(
                text=text,
                model=response.model_version or self.model,
                usage=usage,
            )

        # All keys exhausted
        logger.error("All Gemini API keys are rate limited")
        raise UpstreamError(f"All Gemini API keys are rate limited: {last_error}")
