"""FastAPI router for the search gateway."""

from typing import Optional

from fastapi import APIRouter, Depends

from src.core.dependencies import get_search_client
from src.core.serpapi import SearchResult, SerpApiClient
from src.services.search.service import SearchService

router = APIRouter(prefix="/api", tags=["search"])


def get_search_service(
    client: SerpApiClient = Depends(get_search_client),
) -> SearchService:
    return SearchService(client)


@router.get("/search", response_model=SearchResult, response_model_exclude_none=True)
async def search(
    q: Optional[str] = None,
    service: SearchService = Depends(get_search_service),
) -> SearchResult:
    """Search the web and return organic results, knowledge graph and related searches."""
    return await service.search(q)
