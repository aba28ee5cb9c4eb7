"""Answer orchestration: plan sub-queries, search each, synthesize a cited answer."""

import logging
from typing import Optional, Sequence

from src.core.exceptions import UpstreamError, ValidationError
from src.core.serpapi import OrganicResult, SearchResult
from src.services.agent.gateway import Gateway
from src.services.agent.models import AgentResponse, ConversationEntry, Source, SubQuery
from src.services.agent.planner import SubQueryPlanner, format_history
from src.services.agent.prompts import build_answer_prompt, build_single_shot_prompt
from src.services.llm_gateway.models import LLMResponse

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "---\n\n"


def format_sources(results: Sequence[OrganicResult]) -> str:
    """Label results [Source 1], [Source 2], ... in the given order."""
    context = ""
    for index, result in enumerate(results):
        context += f"[Source {index + 1}] {result.title}\n"
        context += f"{result.snippet}\n"
        context += f"URL: {result.link}\n\n"
    return context


def format_knowledge_graph(result: SearchResult) -> str:
    if result.knowledge_graph and result.knowledge_graph.description:
        return f"Knowledge Graph:\n{result.knowledge_graph.description}\n\n"
    return ""


def format_sub_query_block(
    number: int,
    sub_query: SubQuery,
    result: SearchResult,
    max_results: int = 2,
) -> str:
    """Render one sub-query's search results as a context block."""
    block = f"Sub-query {number}: {sub_query.query}\n"
    block += f"Reason: {sub_query.reason}\n\n"
    block += format_knowledge_graph(result)
    block += "Search Results:\n"
    block += format_sources(result.organic_results[:max_results])
    block += BLOCK_SEPARATOR
    return block


def build_single_shot_context(result: SearchResult, max_results: int = 3) -> str:
    context = format_knowledge_graph(result)
    context += "Search Results:\n"
    context += format_sources(result.organic_results[:max_results])
    return context


def source_number(result: OrganicResult, index: int) -> int:
    """Provider-assigned number, else its position, else the 1-based index."""
    if result.number is not None:
        return result.number
    if result.position is not None:
        return result.position
    return index + 1


class AnswerOrchestrator:
    """Drives the search-and-summarize pipeline for one request.

    Every step is awaited in turn; sub-query searches run one at a time and
    any failure aborts the whole request.
    """

    def __init__(
        self,
        gateway: Gateway,
        planner: SubQueryPlanner,
        history_window: int = 3,
        results_per_subquery: int = 2,
        single_shot_results: int = 3,
    ):
        self.gateway = gateway
        self.planner = planner
        self.history_window = history_window
        self.results_per_subquery = results_per_subquery
        self.single_shot_results = single_shot_results

    async def answer(
        self,
        query: Optional[str],
        history: Optional[Sequence[ConversationEntry]] = None,
    ) -> AgentResponse:
        """
        Answer a question by decomposing it into sub-queries.

        Args:
            query: The user's question
            history: Prior turns echoed back by the browser

        Returns:
            AgentResponse with the markdown answer and one source per sub-query

        Raises:
            ValidationError: If the query is missing or blank
            PlanningError: If the sub-query plan cannot be parsed
            UpstreamError: If any search or completion call fails
        """
        if not query or not query.strip():
            raise ValidationError("Query is required")

        history = history or []
        sub_queries = await self.planner.plan(query, history)

        context = ""
        for index, sub_query in enumerate(sub_queries):
            logger.info(
                f"Searching sub-query {index + 1}/{len(sub_queries)}: {sub_query.query}"
            )
            result = await self._search(sub_query.query)
            context += format_sub_query_block(
                index + 1, sub_query, result, self.results_per_subquery
            )

        prompt = build_answer_prompt(query, format_history(history, self.history_window))
        llm_response = await self._complete(prompt, context)
        logger.info(
            f"Answer for '{query}': {len(llm_response.response)} characters "
            f"from {len(sub_queries)} sub-queries"
        )

        sources = [
            Source(title=f"Sub-query: {sub_query.query}", link="#", number=index + 1)
            for index, sub_query in enumerate(sub_queries)
        ]
        return AgentResponse(answer=llm_response.response, sources=sources, is_markdown=True)

    async def answer_single_shot(
        self,
        query: Optional[str],
        history: Optional[Sequence[ConversationEntry]] = None,
    ) -> AgentResponse:
        """Answer from a single search of the raw query, without decomposition."""
        if not query or not query.strip():
            raise ValidationError("Query is required")

        result = await self._search(query)
        top_results = result.organic_results[: self.single_shot_results]
        context = build_single_shot_context(result, self.single_shot_results)

        prompt = build_single_shot_prompt(
            query, format_history(history, self.history_window)
        )
        llm_response = await self._complete(prompt, context)
        logger.info(
            f"Single-shot answer for '{query}': {len(llm_response.response)} characters"
        )

        sources = [
            Source(title=r.title, link=r.link, number=source_number(r, index))
            for index, r in enumerate(top_results)
        ]
        return AgentResponse(answer=llm_response.response, sources=sources, is_markdown=True)

    # Rejections of internally built requests surface as upstream failures
    async def _search(self, query: str) -> SearchResult:
        try:
            return await self.gateway.search(query)
        except ValidationError as e:
            raise UpstreamError(e.message) from e

    async def _complete(self, prompt: str, context: str) -> LLMResponse:
        try:
            return await self.gateway.complete(prompt, context)
        except ValidationError as e:
            raise UpstreamError(e.message) from e
