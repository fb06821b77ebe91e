"""Article structure and content summaries."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field

from modelkit.schema import Guide

ARTICLE_CATEGORIES = (
    "Technology", "Business", "Science", "Health", "Sports",
    "Entertainment", "Politics", "World", "Opinion", "Other",
)


class ContentComplexity(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class SummaryStyle(StrEnum):
    """How a summary should read. The value is spliced into the prompt."""

    BRIEF = "brief and concise"
    DETAILED = "detailed and comprehensive"
    BULLET_POINTS = "bullet point format"
    EXECUTIVE = "executive summary format"


class ArticleSection(BaseModel):
    title: str = ""
    content: Annotated[str, Guide(count=(50, 500))] = ""
    bullet_points: Annotated[list[str], Guide(count=(0, 5))] = Field(default_factory=list)


class Article(BaseModel):
    """Article outline generated from a topic or source text."""

    headline: str = ""
    subheadline: str = ""
    sections: Annotated[list[ArticleSection], Guide(count=(1, 10))] = Field(default_factory=list)
    category: Annotated[str, Guide(any_of=ARTICLE_CATEGORIES)] = "Other"
    key_takeaways: Annotated[list[str], Guide(count=(3, 7))] = Field(default_factory=list)
    reading_time_minutes: Annotated[int, Guide(range=(1, 60))] = 5
    complexity: ContentComplexity = ContentComplexity.INTERMEDIATE
    target_audience: Annotated[list[str], Guide(count=(1, 3))] = Field(default_factory=list)


class ContentSummary(BaseModel):
    """Structured summary of a piece of content."""

    one_liner: Annotated[str, Guide(count=(10, 50), description="One-line summary")] = ""
    main_summary: Annotated[str, Guide(count=(50, 300), description="Main summary paragraph")] = ""
    key_points: Annotated[list[str], Guide(count=(3, 7), description="Key points extracted")] = Field(
        default_factory=list
    )
    themes: Annotated[list[str], Guide(count=(1, 5), description="Main themes identified")] = Field(
        default_factory=list
    )
    actionable_insights: Annotated[list[str], Guide(count=(0, 5), description="Actionable insights if any")] = Field(
        default_factory=list
    )
    original_reading_time: Annotated[
        int, Guide(range=(1, 120), description="Estimated reading time of the original in minutes")
    ] = 1
