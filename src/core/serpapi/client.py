"""SerpAPI HTTP client for web search."""

import logging
from typing import Any, Optional

import httpx

from src.core.config import Settings
from src.core.exceptions import UpstreamError
from src.core.serpapi.models import SearchResult

logger = logging.getLogger(__name__)


class SerpApiClient:
    """HTTP client for the SerpAPI search provider.

    A single provider call is made per search; failures are not retried.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://serpapi.com/search.json",
        engine: str = "google",
        location: Optional[str] = "United States",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.engine = engine
        self.location = location
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SerpApiClient":
        return cls(
            api_key=settings.serp_api_key,
            base_url=settings.serp_api_url,
            engine=settings.serp_engine,
            location=settings.serp_location or None,
            timeout=settings.search_timeout_seconds,
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Create an async HTTP client for one provider call."""
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def search(self, query: str) -> SearchResult:
        """
        Run a web search and normalize the provider response.

        Args:
            query: Non-empty search text

        Returns:
            SearchResult with organic results, knowledge graph and related searches

        Raises:
            UpstreamError: If the provider is not configured or the call fails
        """
        if not self.api_key:
            raise UpstreamError("SERP_API_KEY is not configured")

        params: dict[str, Any] = {
            "engine": self.engine,
            "api_key": self.api_key,
            "q": query,
        }
        if self.location:
            params["location"] = self.location

        try:
            async with self._get_client() as client:
                response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"SerpAPI request failed: {e}")
            raise UpstreamError(f"Search request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        # SerpAPI reports failures as {"error": "..."}, usually with a 4xx status
        if isinstance(data, dict) and data.get("error"):
            logger.error(f"SerpAPI error for '{query}': {data['error']}")
            raise UpstreamError(str(data["error"]))

        if response.is_error or not isinstance(data, dict):
            logger.error(f"SerpAPI returned {response.status_code}: {response.text[:200]}")
            raise UpstreamError(
                f"Search provider returned HTTP {response.status_code}"
            )

        result = normalize_search_response(data)
        logger.info(
            f"Search for '{query}' returned {len(result.organic_results)} organic results"
        )
        return result


def normalize_search_response(data: dict[str, Any]) -> SearchResult:
    """Keep only the fields the pipeline uses from a raw provider payload."""
    return SearchResult(
        organic_results=data.get("organic_results") or [],
        knowledge_graph=data.get("knowledge_graph") or None,
        related_searches=data.get("related_searches"),
    )
