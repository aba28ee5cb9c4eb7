"""Pydantic models for the answer agent."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SubQuery(BaseModel):
    """A focused search the planner decided is needed."""

    query: str
    reason: str


class Source(BaseModel):
    """Display-only citation record."""

    title: str = ""
    link: str = ""
    number: Optional[int] = None


class ConversationResults(BaseModel):
    """Answer payload of a previous turn, as echoed back by the browser."""

    answer: str = ""
    sources: list[Source] = []
    is_markdown: bool = Field(default=True, alias="isMarkdown")

    model_config = {"populate_by_name": True}


class ConversationEntry(BaseModel):
    """One previous question/answer turn held by the browser."""

    query: str = ""
    results: ConversationResults = ConversationResults()
    timestamp: Optional[datetime] = None


class AgentRequest(BaseModel):
    """Request model for the answer agent."""

    query: Optional[str] = None
    history: Optional[list[ConversationEntry]] = None


class AgentResponse(BaseModel):
    """Cited markdown answer."""

    answer: str
    sources: list[Source] = []
    is_markdown: bool = Field(default=True, alias="isMarkdown")

    model_config = {"populate_by_name": True}
