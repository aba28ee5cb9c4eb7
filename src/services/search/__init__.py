"""Search gateway - normalized web search over the search provider."""

from src.services.search.router import router
from src.services.search.service import SearchService

__all__ = ["router", "SearchService"]
