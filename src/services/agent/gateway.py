"""Access to the search and LLM gateways from the agent pipeline.

The agent either calls its own ``/api/search`` and ``/api/llm`` endpoints over
HTTP at the address the inbound request arrived on, or calls the gateway
services in-process.
"""

import logging
from typing import Any, Optional, Protocol

import httpx
from fastapi import Request

from src.core.config import Settings
from src.core.exceptions import UpstreamError, ValidationError
from src.core.serpapi import SearchResult
from src.services.llm_gateway.models import LLMResponse
from src.services.llm_gateway.service import LLMGatewayService
from src.services.search.service import SearchService

logger = logging.getLogger(__name__)


class Gateway(Protocol):
    """Protocol for reaching the search and LLM gateways."""

    async def search(self, query: str) -> SearchResult:
        ...

    async def complete(self, query: str, context: str = "") -> LLMResponse:
        ...


def base_url_from_request(request: Request, settings: Settings) -> str:
    """Derive the service's own address from forwarded-protocol and host headers."""
    proto = request.headers.get("x-forwarded-proto") or settings.default_forwarded_proto
    # Proxies may append their own protocol: "https, http"
    proto = proto.split(",")[0].strip()
    host = request.headers.get("host") or settings.default_host
    return f"{proto}://{host}"


class LocalGateway:
    """Calls the gateway services in the same process."""

    def __init__(self, search_service: SearchService, llm_gateway: LLMGatewayService):
        self.search_service = search_service
        self.llm_gateway = llm_gateway

    async def search(self, query: str) -> SearchResult:
        return await self.search_service.search(query)

    async def complete(self, query: str, context: str = "") -> LLMResponse:
        return await self.llm_gateway.answer(query, context)


class HttpGateway:
    """Calls the gateway endpoints over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def search(self, query: str) -> SearchResult:
        data = await self._request("GET", "/api/search", params={"q": query})
        return SearchResult.model_validate(data)

    async def complete(self, query: str, context: str = "") -> LLMResponse:
        data = await self._request(
            "POST", "/api/llm", json={"query": query, "context": context}
        )
        return LLMResponse.model_validate(data)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._get_client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Gateway call {method} {path} failed: {e}")
            raise UpstreamError(f"Gateway call to {path} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = f"Gateway call to {path} returned HTTP {response.status_code}"
            if isinstance(data, dict) and data.get("error"):
                message = str(data["error"])
            logger.error(f"Gateway call {method} {path} failed: {message}")
            if response.status_code == 400:
                raise ValidationError(message)
            raise UpstreamError(message)

        if not isinstance(data, dict):
            raise UpstreamError(f"Gateway call to {path} returned a non-JSON body")
        return data
