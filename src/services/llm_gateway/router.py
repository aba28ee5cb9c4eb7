"""FastAPI router for the LLM gateway."""

from fastapi import APIRouter, Depends

from src.core.dependencies import get_llm_client
from src.llm.base import LLMClient
from src.services.llm_gateway.models import LLMRequest, LLMResponse
from src.services.llm_gateway.service import LLMGatewayService

router = APIRouter(prefix="/api", tags=["llm"])


def get_llm_gateway(llm_client: LLMClient = Depends(get_llm_client)) -> LLMGatewayService:
    return LLMGatewayService(llm_client)


@router.post("/llm", response_model=LLMResponse)
async def complete(
    request: LLMRequest,
    service: LLMGatewayService = Depends(get_llm_gateway),
) -> LLMResponse:
    """Answer a query using the supplied context."""
    return await service.answer(request.query, request.context)
