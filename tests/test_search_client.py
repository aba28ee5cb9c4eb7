"""Tests for the SerpAPI client and search gateway service."""
import httpx
import pytest

from src.core.exceptions import UpstreamError, ValidationError
from src.core.serpapi import SerpApiClient, normalize_search_response
from src.services.search.service import SearchService


def make_client(handler, api_key: str = "serp-key") -> SerpApiClient:
    return SerpApiClient(
        api_key=api_key,
        base_url="https://serpapi.example/search.json",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_search_sends_provider_parameters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(200, json={"organic_results": []})

    await make_client(handler).search("capital of France")

    assert seen == {
        "engine": "google",
        "api_key": "serp-key",
        "q": "capital of France",
        "location": "United States",
    }


@pytest.mark.asyncio
async def test_search_normalizes_provider_payload():
    payload = {
        "search_metadata": {"id": "abc"},
        "organic_results": [
            {"position": 1, "title": "Paris", "link": "https://x", "snippet": "Paris is the capital...", "source": "Wiki"},
            {"position": 2, "title": "France", "link": "https://y"},
        ],
        "knowledge_graph": {"title": "Paris", "description": "Capital of France", "type": "City"},
        "related_searches": [{"query": "paris population", "link": "https://serpapi.example/related"}],
    }

    result = await make_client(lambda request: httpx.Response(200, json=payload)).search("paris")

    assert [r.title for r in result.organic_results] == ["Paris", "France"]
    assert result.organic_results[0].position == 1
    assert result.organic_results[1].snippet == ""
    assert result.knowledge_graph.description == "Capital of France"
    assert result.related_searches[0].query == "paris population"


@pytest.mark.asyncio
async def test_missing_organic_results_becomes_empty_list():
    result = await make_client(lambda request: httpx.Response(200, json={"search_metadata": {}})).search("zzz")

    assert result.organic_results == []
    assert result.knowledge_graph is None
    assert result.related_searches is None


def test_normalize_handles_null_organic_results():
    assert normalize_search_response({"organic_results": None}).organic_results == []


@pytest.mark.asyncio
async def test_provider_error_body_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Invalid API key. Your API key should be here: https://serpapi.com/manage-api-key"})

    with pytest.raises(UpstreamError, match="Invalid API key"):
        await make_client(handler).search("anything")


@pytest.mark.asyncio
async def test_non_json_failure_raises_upstream_error():
    with pytest.raises(UpstreamError, match="HTTP 502"):
        await make_client(lambda request: httpx.Response(502, text="Bad Gateway")).search("anything")


@pytest.mark.asyncio
async def test_transport_failure_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError, match="connection refused"):
        await make_client(handler).search("anything")


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_calling_provider():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(UpstreamError, match="SERP_API_KEY"):
        await make_client(handler, api_key="").search("anything")

    assert calls == []


@pytest.mark.asyncio
async def test_provider_is_called_once_per_search():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"error": "Internal error"})

    with pytest.raises(UpstreamError):
        await make_client(handler).search("anything")

    assert len(calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("query", [None, "", "  "])
async def test_search_service_rejects_empty_query(query):
    client = make_client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(ValidationError):
        await SearchService(client).search(query)
