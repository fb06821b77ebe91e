"""Sentiment analysis on top of a session."""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence

from modelkit.catalog import SentimentAnalysis, SentimentComparison
from modelkit.schema import Partial
from modelkit.session import SessionManager

_ANALYZE = """\
Analyze the sentiment of the following text. Identify the primary sentiment,
emotions present, key phrases that indicate sentiment, overall tone, and
how subjective vs objective the text is.

Text to analyze:
---
{text}
---"""

_ANALYZE_STREAMING = """\
Analyze the sentiment of the following text:
---
{text}
---"""

_COMPARE = """\
Compare the sentiment between these two texts:

Text 1:
---
{text1}
---

Text 2:
---
{text2}
---

Provide individual analysis for each and a comparison."""


class SentimentAnalyzer:
    """Sentiment of one text, many texts, or a pair of texts."""

    def __init__(self, session: SessionManager) -> None:
        self._session = session

    async def analyze(self, text: str) -> SentimentAnalysis:
        return await self._session.generate(_ANALYZE.format(text=text), SentimentAnalysis)

    async def analyze_batch(self, texts: Sequence[str], *, concurrency: int | None = None) -> list[SentimentAnalysis]:
        """Analyze texts in parallel. Results follow the input order."""
        prompts = [_ANALYZE.format(text=t) for t in texts]
        return await self._session.generate_batch(prompts, SentimentAnalysis, concurrency=concurrency)

    def analyze_streaming(self, text: str) -> AsyncIterator[Partial]:
        return self._session.generate_streaming(_ANALYZE_STREAMING.format(text=text), SentimentAnalysis)

    async def compare_sentiment(self, text1: str, text2: str) -> SentimentComparison:
        return await self._session.generate(_COMPARE.format(text1=text1, text2=text2), SentimentComparison)
