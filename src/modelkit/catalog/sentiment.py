"""Sentiment analysis results."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field

from modelkit.schema import Guide


class Sentiment(StrEnum):
    VERY_POSITIVE = "Very Positive"
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"
    VERY_NEGATIVE = "Very Negative"


class Emotion(StrEnum):
    JOY = "joy"
    SADNESS = "sadness"
    ANGER = "anger"
    FEAR = "fear"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    TRUST = "trust"
    ANTICIPATION = "anticipation"
    NEUTRAL = "neutral"


class TextTone(StrEnum):
    FORMAL = "formal"
    INFORMAL = "informal"
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    ACADEMIC = "academic"
    CONVERSATIONAL = "conversational"
    NEUTRAL = "neutral"


class ComparisonResult(StrEnum):
    TEXT1 = "Text 1"
    TEXT2 = "Text 2"
    EQUAL = "Equal"


class EmotionScore(BaseModel):
    emotion: Emotion = Emotion.NEUTRAL
    intensity: Annotated[float, Guide(range=(0.0, 1.0))] = 0.5


class SentimentAnalysis(BaseModel):
    """Sentiment, emotions and tone of a text."""

    primary_sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: Annotated[float, Guide(range=(0.0, 1.0))] = 0.5
    emotions: Annotated[list[EmotionScore], Guide(count=(1, 5))] = Field(default_factory=list)
    key_phrases: Annotated[list[str], Guide(count=(1, 10))] = Field(default_factory=list)
    tone: TextTone = TextTone.NEUTRAL
    subjectivity: Annotated[
        float, Guide(range=(0.0, 1.0), description="0 is fully objective, 1 fully subjective")
    ] = 0.5


class SentimentComparison(BaseModel):
    """Side-by-side sentiment of two texts."""

    text1_analysis: SentimentAnalysis = Field(default_factory=SentimentAnalysis)
    text2_analysis: SentimentAnalysis = Field(default_factory=SentimentAnalysis)
    more_positive: Annotated[
        ComparisonResult, Guide(description="Which text is more positive: text1, text2, or equal")
    ] = ComparisonResult.EQUAL
    key_differences: Annotated[list[str], Guide(count=(1, 5))] = Field(default_factory=list)
    similarities: Annotated[list[str], Guide(count=(0, 3))] = Field(default_factory=list)
