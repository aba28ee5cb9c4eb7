"""Sub-query planning: ask the LLM which searches are needed and parse its reply."""

import asyncio
import json
import logging
import re
from typing import Awaitable, Callable, Optional, Sequence

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.core.exceptions import PlanningError, SubQueryParseError
from src.services.agent.gateway import Gateway
from src.services.agent.models import ConversationEntry, SubQuery
from src.services.agent.prompts import build_planning_prompt

logger = logging.getLogger(__name__)

# Matches a fenced block with any (or no) language tag anywhere in the reply
FENCED_BLOCK_PATTERN = re.compile(r"```(?:\w+)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def format_history(
    history: Optional[Sequence[ConversationEntry]],
    window: int = 3,
) -> str:
    """
    Render up to ``window`` prior turns as Q:/A: pairs, most recent last.

    Entries are ordered by timestamp when every entry carries one,
    otherwise the given order is kept.
    """
    if not history or window <= 0:
        return ""

    entries = list(history)
    if all(entry.timestamp is not None for entry in entries):
        entries.sort(key=lambda entry: entry.timestamp.timestamp())

    pairs = [
        f"Q: {entry.query}\nA: {entry.results.answer}"
        for entry in entries[-window:]
    ]
    return "\n\n".join(pairs)


def extract_json_text(text: str) -> str:
    """Return the content of a fenced code block if present, else the stripped text."""
    match = FENCED_BLOCK_PATTERN.search(text)
    if match:
        return match.group(1)
    return text.strip()


def parse_sub_queries(text: str) -> list[SubQuery]:
    """
    Parse an LLM reply into an ordered list of sub-queries.

    Raises:
        SubQueryParseError: If the reply is not a JSON array whose every
            element has a non-blank string ``query`` and a string
            ``reason``
    """
    payload = extract_json_text(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise SubQueryParseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SubQueryParseError(
            f"Expected a JSON array of sub-queries, got {type(data).__name__}"
        )

    sub_queries = []
    for index, item in enumerate(data):
        if (
            not isinstance(item, dict)
            or not isinstance(item.get("query"), str)
            or not item["query"].strip()
            or not isinstance(item.get("reason"), str)
        ):
            raise SubQueryParseError(
                f"Sub-query {index} must have a non-blank string 'query' and a string 'reason'"
            )
        sub_queries.append(SubQuery(query=item["query"], reason=item["reason"]))

    return sub_queries


class SubQueryPlanner:
    """Decomposes a question into the web searches needed to answer it."""

    def __init__(
        self,
        gateway: Gateway,
        max_attempts: int = 5,
        retry_delay: float = 1.0,
        requery_on_retry: bool = False,
        history_window: int = 3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.gateway = gateway
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.requery_on_retry = requery_on_retry
        self.history_window = history_window
        self._sleep = sleep

    async def plan(
        self,
        query: str,
        history: Optional[Sequence[ConversationEntry]] = None,
    ) -> list[SubQuery]:
        """
        Ask the LLM for a sub-query plan and parse it.

        Parsing is attempted up to ``max_attempts`` times with a fixed pause
        between attempts. Unless ``requery_on_retry`` is set, every attempt
        parses the same reply.

        Args:
            query: The user's question
            history: Prior turns, of which the last ``history_window`` are used

        Returns:
            Sub-queries in the order the LLM listed them (possibly empty)

        Raises:
            PlanningError: If no attempt produced a valid sub-query list
            UpstreamError: If the LLM call fails
        """
        prompt = build_planning_prompt(query, format_history(history, self.history_window))
        reply = await self._ask(prompt)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(SubQueryParseError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    if self.requery_on_retry and attempt.retry_state.attempt_number > 1:
                        reply = await self._ask(prompt)
                    sub_queries = parse_sub_queries(reply)
        except SubQueryParseError as e:
            logger.error(f"Sub-query planning failed after {self.max_attempts} attempts: {e}")
            raise PlanningError(
                f"Failed to parse sub-queries after {self.max_attempts} attempts: {e}"
            ) from e

        logger.info(f"Planned {len(sub_queries)} sub-queries for '{query}'")
        return sub_queries

    async def _ask(self, prompt: str) -> str:
        response = await self.gateway.complete(prompt, "")
        return response.response
