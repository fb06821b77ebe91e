"""Content summarization with selectable style."""

from __future__ import annotations

from collections.abc import AsyncIterator

from modelkit.catalog import ContentSummary, SummaryStyle
from modelkit.schema import Partial
from modelkit.session import SessionManager


def build_prompt(content: str, style: SummaryStyle) -> str:
    return (
        f"Summarize the following content in a {style.value} style:\n\n"
        f"---\n{content}\n---\n\n"
        "Provide a structured summary with key points, main themes, and actionable insights if applicable."
    )


class ContentSummarizer:
    def __init__(self, session: SessionManager) -> None:
        self._session = session

    async def summarize(self, content: str, style: SummaryStyle = SummaryStyle.DETAILED) -> ContentSummary:
        return await self._session.generate(build_prompt(content, style), ContentSummary)

    def summarize_streaming(
        self, content: str, style: SummaryStyle = SummaryStyle.DETAILED
    ) -> AsyncIterator[Partial]:
        """Snapshots of the summary as it is generated."""
        return self._session.generate_streaming(build_prompt(content, style), ContentSummary)
