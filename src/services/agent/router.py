"""FastAPI router for the answer agent."""

import logging

from fastapi import APIRouter, Depends, Request

from src.core.config import Settings
from src.core.dependencies import get_llm_client, get_search_client, get_settings
from src.core.serpapi import SerpApiClient
from src.llm.base import LLMClient
from src.services.agent.gateway import (
    Gateway,
    HttpGateway,
    LocalGateway,
    base_url_from_request,
)
from src.services.agent.models import AgentRequest, AgentResponse
from src.services.agent.planner import SubQueryPlanner
from src.services.agent.service import AnswerOrchestrator
from src.services.llm_gateway.service import LLMGatewayService
from src.services.search.service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["agent"])


def get_gateway(
    request: Request,
    settings: Settings = Depends(get_settings),
    search_client: SerpApiClient = Depends(get_search_client),
    llm_client: LLMClient = Depends(get_llm_client),
) -> Gateway:
    """Gateway access for this request, per AGENT_GATEWAY_TRANSPORT."""
    if settings.agent_gateway_transport.lower() == "local":
        return LocalGateway(SearchService(search_client), LLMGatewayService(llm_client))

    base_url = base_url_from_request(request, settings)
    logger.debug(f"Agent gateway base URL: {base_url}")
    return HttpGateway(base_url, timeout=settings.gateway_timeout_seconds)


def get_orchestrator(
    gateway: Gateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> AnswerOrchestrator:
    planner = SubQueryPlanner(
        gateway,
        max_attempts=settings.planner_max_attempts,
        retry_delay=settings.planner_retry_delay_seconds,
        requery_on_retry=settings.planner_requery_on_retry,
        history_window=settings.history_window,
    )
    return AnswerOrchestrator(
        gateway,
        planner,
        history_window=settings.history_window,
        results_per_subquery=settings.agent_results_per_subquery,
        single_shot_results=settings.single_shot_results,
    )


@router.post("/agent", response_model=AgentResponse)
async def answer(
    request: AgentRequest,
    orchestrator: AnswerOrchestrator = Depends(get_orchestrator),
) -> AgentResponse:
    """
    Answer a question with web search.

    - Decomposes the question into sub-queries with the LLM
    - Searches each sub-query in order and assembles the results as context
    - Returns a cited markdown answer with one source entry per sub-query
    """
    logger.info(f"Agent query: {request.query}")
    return await orchestrator.answer(request.query, request.history)


@router.post("/agent/single", response_model=AgentResponse)
async def answer_single_shot(
    request: AgentRequest,
    orchestrator: AnswerOrchestrator = Depends(get_orchestrator),
) -> AgentResponse:
    """Answer from one search of the raw question, citing its top results."""
    logger.info(f"Single-shot agent query: {request.query}")
    return await orchestrator.answer_single_shot(request.query, request.history)
