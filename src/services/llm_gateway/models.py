"""Pydantic models for the LLM gateway."""

from typing import Optional

from pydantic import BaseModel

from src.llm.base import LLMUsage


class LLMRequest(BaseModel):
    """Request model for a single context-grounded completion."""

    query: Optional[str] = None
    context: Optional[str] = ""


class LLMResponse(BaseModel):
    """Completion text with the model id and token usage."""

    response: str
    model: str
    usage: LLMUsage
