"""FastAPI dependencies for the settings and provider clients held on application state."""

from fastapi import Request

from src.core.config import Settings
from src.core.serpapi import SerpApiClient
from src.llm.base import LLMClient


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_search_client(request: Request) -> SerpApiClient:
    """Search provider client constructed at application startup."""
    return request.app.state.search_client


def get_llm_client(request: Request) -> LLMClient:
    """Completion provider client constructed at application startup."""
    return request.app.state.llm_client
