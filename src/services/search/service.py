"""Search gateway service."""

import logging

from src.core.exceptions import ValidationError
from src.core.serpapi import SearchResult, SerpApiClient

logger = logging.getLogger(__name__)


class SearchService:
    """Validates search requests and forwards them to the search provider."""

    def __init__(self, client: SerpApiClient):
        self.client = client

    async def search(self, query: str | None) -> SearchResult:
        """
        Search the web for a query.

        Raises:
            ValidationError: If the query is missing or blank
            UpstreamError: If the provider call fails
        """
        if not query or not query.strip():
            raise ValidationError('Query parameter "q" is required')

        return await self.client.search(query)
