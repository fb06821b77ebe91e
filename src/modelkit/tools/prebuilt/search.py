"""Search tools with simulated results."""

from __future__ import annotations

import random
from typing import Annotated, ClassVar
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from modelkit.schema import Guide

from ..base import BaseTool, ToolMetadata


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    snippet: str
    url: str
    relevance_score: float = Field(ge=0, le=1)

    def describe(self) -> str:
        return f"{self.title}\n{self.snippet}\nURL: {self.url}\nRelevance: {self.relevance_score * 100:.0f}%"


def _format(query: str, results: list[SearchResult]) -> str:
    if not results:
        return f"No results for: {query}"
    return f"**Search results for:** {query}\n\n" + "\n\n".join(r.describe() for r in results)


class SearchParams(BaseModel):
    query: Annotated[str, Guide(count=(1, None), description="Search query string")]


class DomainSearchParams(BaseModel):
    query: Annotated[str, Guide(count=(1, None), description="Search query string")]
    domain: Annotated[
        str,
        Guide(regex=r"[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+", description="Domain to search within, e.g. python.org"),
    ]


class SearchTool(BaseTool[SearchParams]):
    """General knowledge search."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="search",
        description="Search for information on a topic and return the top results.",
        category="search",
    )
    params_schema: ClassVar[type[SearchParams]] = SearchParams

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def search(self, query: str) -> list[SearchResult]:
        # Scores jitter slightly but keep their order
        jitter = self._rng.uniform(0, 0.04)
        return [
            SearchResult(
                title=f"Result for: {query}",
                snippet=f"A summary of what is known about {query}, with links to primary sources.",
                url="https://example.com/result/1",
                relevance_score=round(0.95 - jitter, 2),
            ),
            SearchResult(
                title=f"Related: {query} - Deep Dive",
                snippet=f"An in-depth analysis related to {query} with comprehensive information and examples.",
                url="https://example.com/result/2",
                relevance_score=round(0.87 - jitter, 2),
            ),
            SearchResult(
                title=f"{query} - Official Documentation",
                snippet=f"Official documentation and guidelines for {query} with code examples.",
                url="https://example.com/result/3",
                relevance_score=round(0.82 - jitter, 2),
            ),
        ]

    def _run(self, params: SearchParams) -> str:
        return _format(params.query, self.search(params.query))


class DomainSearchTool(BaseTool[DomainSearchParams]):
    """Search restricted to one domain."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="search_domain",
        description="Search for information within a specific website domain.",
        category="search",
    )
    params_schema: ClassVar[type[DomainSearchParams]] = DomainSearchParams

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def search(self, query: str, domain: str) -> list[SearchResult]:
        return [
            SearchResult(
                title=f"[{domain}] {query}",
                snippet=f"Results from {domain} about {query}.",
                url=f"https://{domain}/search?q={quote(query)}",
                relevance_score=round(0.9 - self._rng.uniform(0, 0.04), 2),
            )
        ]

    def _run(self, params: DomainSearchParams) -> str:
        return _format(params.query, self.search(params.query, params.domain))
