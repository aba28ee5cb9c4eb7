"""SerpAPI search provider integration."""

from src.core.serpapi.client import SerpApiClient, normalize_search_response
from src.core.serpapi.models import (
    KnowledgeGraph,
    OrganicResult,
    RelatedSearch,
    SearchResult,
)

__all__ = [
    "SerpApiClient",
    "normalize_search_response",
    "KnowledgeGraph",
    "OrganicResult",
    "RelatedSearch",
    "SearchResult",
]
