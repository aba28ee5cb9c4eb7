"""Searchwise - search-and-summarize web service.

FastAPI application entry point with lifespan management.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.core.config import Settings, settings as default_settings
from src.core.dependencies import get_settings
from src.core.exceptions import SearchwiseError
from src.core.logging import log_provider_keys, setup_logging
from src.core.serpapi import SerpApiClient
from src.llm import LLMClient, get_llm_client
from src.services.agent import router as agent_router
from src.services.llm_gateway import router as llm_router
from src.services.search import router as search_router
from src.web import router as web_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown."""
    # Startup
    logger.info(f"Starting {app.state.settings.app_name}...")
    log_provider_keys(app.state.settings)
    yield
    # Shutdown
    logger.info("Shutting down...")


async def searchwise_error_handler(request: Request, exc: SearchwiseError) -> JSONResponse:
    """Convert pipeline errors to an {"error": message} body with their status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 rather than FastAPI's 422."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    logger.info(f"{request.method} {request.url.path} rejected: {details}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed: {exc}")
    message = str(exc) or "An error occurred"
    return JSONResponse(status_code=500, content={"error": message})


# Health check models
class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    search_configured: bool
    llm_configured: bool
    llm_provider: str


def create_app(
    settings: Optional[Settings] = None,
    search_client: Optional[SerpApiClient] = None,
    llm_client: Optional[LLMClient] = None,
) -> FastAPI:
    """
    Build the application with explicitly constructed provider clients.

    Clients default to ones built from ``settings``; tests pass fakes.
    """
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title="Searchwise",
        description="Search-and-summarize: web search results answered by an LLM with citations",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.search_client = search_client or SerpApiClient.from_settings(settings)
    app.state.llm_client = llm_client or get_llm_client(settings)

    app.add_exception_handler(SearchwiseError, searchwise_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include service routers
    app.include_router(search_router)
    app.include_router(llm_router)
    app.include_router(agent_router)
    app.include_router(web_router)

    @app.get("/api")
    async def root() -> dict:
        """Root endpoint with service info."""
        return {
            "name": settings.app_name,
            "version": VERSION,
            "description": "Search-and-summarize web service",
            "services": ["search", "llm", "agent"],
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Report which providers have API keys configured."""
        current = get_settings(request)
        provider = current.llm_provider.lower()
        if provider == "gemini":
            llm_configured = bool(current.gemini_api_keys)
        else:
            llm_configured = bool(current.openai_api_key)
        search_configured = bool(current.serp_api_key)

        status = "healthy" if (search_configured and llm_configured) else "degraded"

        return HealthResponse(
            status=status,
            search_configured=search_configured,
            llm_configured=llm_configured,
            llm_provider=provider,
        )

    return app


app = create_app()
