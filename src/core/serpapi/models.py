"""Pydantic models for normalized search provider responses."""

from typing import Optional

from pydantic import BaseModel


class OrganicResult(BaseModel):
    """A non-sponsored web search hit."""

    title: str = ""
    link: str = ""
    snippet: str = ""
    number: Optional[int] = None
    position: Optional[int] = None


class KnowledgeGraph(BaseModel):
    """Structured summary panel for an entity or topic."""

    title: Optional[str] = None
    description: Optional[str] = None


class RelatedSearch(BaseModel):
    """Related query suggested by the provider."""

    query: str = ""


class SearchResult(BaseModel):
    """Normalized search response.

    ``organic_results`` is always a list, even when the provider omits it.
    """

    organic_results: list[OrganicResult] = []
    knowledge_graph: Optional[KnowledgeGraph] = None
    related_searches: Optional[list[RelatedSearch]] = None
