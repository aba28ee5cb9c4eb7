"""LLM integrations for Searchwise."""

from src.llm.base import LLMClient, LLMCompletion, LLMUsage, get_llm_client

__all__ = [
    "get_llm_client",
    "LLMClient",
    "LLMCompletion",
    "LLMUsage",
]
