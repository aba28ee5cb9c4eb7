"""LLM gateway - context-grounded completions."""

from src.services.llm_gateway.router import router
from src.services.llm_gateway.service import LLMGatewayService

__all__ = ["router", "LLMGatewayService"]
