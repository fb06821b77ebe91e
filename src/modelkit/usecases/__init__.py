"""Ready-made tasks built on `SessionManager`."""

from .forms import SmartFormFiller
from .sentiment import SentimentAnalyzer
from .summarizer import ContentSummarizer

__all__ = ["SentimentAnalyzer", "ContentSummarizer", "SmartFormFiller"]
