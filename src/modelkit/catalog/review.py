"""Movie review."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field

from modelkit.schema import Guide


class ReviewSentiment(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class MovieReview(BaseModel):
    """Structured review of a film."""

    title: str = ""
    sentiment: Annotated[
        ReviewSentiment, Guide(description="Overall sentiment: positive, negative, or neutral")
    ] = ReviewSentiment.NEUTRAL
    rating: Annotated[int, Guide(range=(1, 10))] = 5
    themes: Annotated[list[str], Guide(count=(1, 5), description="Main themes discussed in the review")] = Field(
        default_factory=list
    )
    summary: Annotated[str, Guide(count=(10, 100), description="Concise summary in 10-100 characters")] = ""
    is_recommended: bool = False
