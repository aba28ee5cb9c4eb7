"""Unified LLM interface for provider switching."""

import logging
from typing import Optional, Protocol

from pydantic import BaseModel

from src.core.config import Settings

logger = logging.getLogger(__name__)


class LLMUsage(BaseModel):
    """Token counts reported by the completion provider."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class LLMCompletion(BaseModel):
    """A completion together with the model that produced it."""

    text: str
    model: str
    usage: LLMUsage = LLMUsage()


class LLMClient(Protocol):
    """Protocol for LLM clients."""

    async def complete(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
    ) -> LLMCompletion:
        """Generate a completion from the LLM."""
        ...


def get_llm_client(settings: Settings) -> LLMClient:
    """
    Build the LLM client selected by the LLM_PROVIDER setting.

    API keys are not checked here; a missing key fails on the first call.

    Returns:
        LLMClient instance (either OpenAI or Gemini)

    Raises:
        ValueError: If provider is not supported
    """
    provider = settings.llm_provider.lower()

    if provider == "openai":
        from src.llm.openai import OpenAIClient

        logger.info(f"Using OpenAI LLM provider (model: {settings.openai_model})")
        return OpenAIClient(api_key=settings.openai_api_key, model=settings.openai_model)

    elif provider == "gemini":
        from src.llm.gemini import GeminiClient
        from src.llm.key_rotator import GeminiKeyRotator

        logger.info(f"Using Gemini LLM provider (model: {settings.gemini_model})")
        return GeminiClient(
            rotator=GeminiKeyRotator(settings.gemini_api_keys),
            model=settings.gemini_model,
        )

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: {provider}. Supported: openai, gemini"
        )
